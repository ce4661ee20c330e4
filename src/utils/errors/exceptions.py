"""Infrastructure exceptions shared by stores and services."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base class for transient backend failures (storage, inventory)."""


class RedisConnectionError(InfrastructureError):
    """Redis could not be reached or timed out."""


class FirestoreUnavailableError(InfrastructureError):
    """Firestore rejected or failed the operation."""
