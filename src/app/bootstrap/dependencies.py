"""Factories - build concrete implementations from settings.

Each factory accepts its collaborators explicitly so the app (and tests)
decide what is shared.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.infra.hetzner import create_hetzner_inventory_client
from app.infra.stores import (
    FirestoreTeamMappingStore,
    MemoryTeamMappingStore,
    RedisTeamMappingStore,
)
from app.services import EventForwarder, TeamRegistry
from config.settings import (
    get_firestore_settings,
    get_hetzner_settings,
    get_registry_settings,
    get_slack_settings,
)

if TYPE_CHECKING:
    from app.protocols import InstanceInventoryProtocol, TeamMappingStoreProtocol

logger = logging.getLogger(__name__)


def create_team_mapping_store(
    *,
    redis_client: Any | None = None,
    firestore_client: Any | None = None,
) -> TeamMappingStoreProtocol:
    """Create the mapping store selected by TEAM_MAPPING_BACKEND.

    Raises:
        ValueError: If the selected backend has no client
    """
    settings = get_registry_settings()
    backend = settings.backend

    if backend == "redis":
        if redis_client is None:
            msg = "TEAM_MAPPING_BACKEND=redis requires a Redis client"
            raise ValueError(msg)
        logger.info("team_mapping_store_created", extra={"backend": "redis"})
        return RedisTeamMappingStore(redis_client, key_prefix=settings.redis_key_prefix)

    if backend == "firestore":
        if firestore_client is None:
            msg = "TEAM_MAPPING_BACKEND=firestore requires a Firestore client"
            raise ValueError(msg)
        logger.info("team_mapping_store_created", extra={"backend": "firestore"})
        return FirestoreTeamMappingStore(
            firestore_client,
            collection=get_firestore_settings().collection_team_mappings,
        )

    logger.info("team_mapping_store_created", extra={"backend": "memory"})
    return MemoryTeamMappingStore()


def create_team_registry(
    store: TeamMappingStoreProtocol,
    inventory: InstanceInventoryProtocol | None = None,
) -> TeamRegistry:
    return TeamRegistry(
        store,
        inventory,
        domain_suffix=get_hetzner_settings().domain_suffix,
    )


def create_instance_inventory() -> InstanceInventoryProtocol | None:
    return create_hetzner_inventory_client()


def create_event_forwarder() -> EventForwarder:
    settings = get_slack_settings()
    return EventForwarder(
        timeout_seconds=settings.forward_timeout_seconds,
        path=settings.forward_path,
    )
