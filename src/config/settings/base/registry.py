"""Team registry settings (mapping store backend, startup preload)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from config.settings.base.core import parse_environment

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

TeamMappingBackend = Literal["memory", "redis", "firestore"]

VALID_BACKENDS = ("memory", "redis", "firestore")


@dataclass(frozen=True)
class RegistrySettings:
    """Settings for the team → instance registry.

    Attributes:
        backend: Where mappings are persisted
        redis_key_prefix: Key namespace for the Redis backend
        preload_on_startup: Warm the cache from the inventory at boot
    """

    backend: TeamMappingBackend = "memory"
    redis_key_prefix: str = "team_mapping:"
    preload_on_startup: bool = True

    def validate(self, base: BaseSettings) -> list[str]:
        errors: list[str] = []

        if self.backend not in VALID_BACKENDS:
            errors.append(f"TEAM_MAPPING_BACKEND invalid: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append("TEAM_MAPPING_BACKEND=memory is not allowed outside development")

        if self.backend == "redis" and not base.redis_url:
            errors.append("REDIS_URL is required for TEAM_MAPPING_BACKEND=redis")

        if not self.redis_key_prefix:
            errors.append("TEAM_MAPPING_REDIS_PREFIX must not be empty")

        return errors


def _default_backend(environment: str) -> str:
    return "memory" if parse_environment(environment) == "development" else "firestore"


def _load_registry_from_env() -> RegistrySettings:
    environment = os.getenv("ENVIRONMENT", "development")
    backend = os.getenv("TEAM_MAPPING_BACKEND", _default_backend(environment)).lower()
    return RegistrySettings(
        backend=backend,  # type: ignore[arg-type]
        redis_key_prefix=os.getenv("TEAM_MAPPING_REDIS_PREFIX", "team_mapping:"),
        preload_on_startup=os.getenv("PRELOAD_ON_STARTUP", "true").lower() in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_registry_settings() -> RegistrySettings:
    """Return the cached RegistrySettings."""
    return _load_registry_from_env()
