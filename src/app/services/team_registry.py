"""Team registry - resolves a Slack team to the instance serving it.

Lookup order on ``resolve``: in-process cache, mapping store, inventory labels.
The cache lives as long as the registry object (one per process in the app,
one per test otherwise) and is never expired; ``preload`` warms it after a
restart.

Cache access is plain dict assignment on the event loop: concurrent writes
for the same team are last-write-wins.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.instance import TEAM_ID_LABEL, TEAM_NAME_LABEL, slugify_label_value
from app.infra.http import HttpError
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from app.domain.instance import Instance
    from app.domain.team_mapping import TeamMapping
    from app.protocols.instance_inventory import InstanceInventoryProtocol
    from app.protocols.team_mapping_store import TeamMappingStoreProtocol

logger = logging.getLogger(__name__)

# Failures of the inventory that degrade to "not found"
_INVENTORY_ERRORS = (HttpError, KeyError, ValueError)


class TeamRegistry:
    """Cached team_id → TeamMapping registry.

    Args:
        store: Persistent mapping store
        inventory: Instance inventory, None when not configured
        domain_suffix: Suffix used to derive domains from inventory labels
    """

    def __init__(
        self,
        store: TeamMappingStoreProtocol,
        inventory: InstanceInventoryProtocol | None = None,
        *,
        domain_suffix: str,
    ) -> None:
        self._store = store
        self._inventory = inventory
        self._domain_suffix = domain_suffix
        self._cache: dict[str, TeamMapping] = {}

    async def resolve(self, team_id: str) -> TeamMapping | None:
        """Return the mapping for ``team_id`` or None.

        Store and inventory failures are logged and treated as a miss so a
        webhook can always be acknowledged.
        """
        cached = self._cache.get(team_id)
        if cached is not None:
            logger.debug("team_registry_cache_hit", extra={"team_id": team_id})
            return cached

        mapping = await self._resolve_from_store(team_id)
        if mapping is None:
            mapping = await self._resolve_from_inventory(team_id)

        if mapping is None:
            logger.warning("team_registry_miss", extra={"team_id": team_id})
            return None

        self._cache[team_id] = mapping
        return mapping

    async def save(self, mapping: TeamMapping) -> None:
        """Upsert ``mapping`` into the store, then into the cache.

        Raises:
            InfrastructureError: If the store write fails. The cache is left
                untouched in that case.
        """
        await self._store.upsert(mapping)
        self._cache[mapping.team_id] = mapping
        logger.info(
            "team_mapping_saved",
            extra={
                "team_id": mapping.team_id,
                "team_name": mapping.team_name,
                "domain": mapping.domain,
                "instance_id": mapping.instance_id,
            },
        )
        if mapping.instance_id and self._inventory is not None:
            await self._label_instance(mapping)

    async def preload(self) -> int:
        """Warm the cache from the inventory and the store.

        With an inventory, every managed instance carrying a team label
        contributes one mapping (the persisted one when available, else the
        label-derived one). Without an inventory, every persisted mapping is
        loaded. Entries are upserted, so repeated calls are idempotent.

        Returns:
            Number of mappings loaded, 0 when the inventory is unreachable.
        """
        try:
            loaded = await self._collect_preload()
        except _INVENTORY_ERRORS as exc:
            logger.error(
                "team_registry_preload_failed",
                extra={"error_type": type(exc).__name__},
            )
            return 0

        self._cache.update(loaded)
        logger.info("team_registry_preloaded", extra={"count": len(loaded)})
        return len(loaded)

    def list_cached(self) -> list[TeamMapping]:
        """Cache contents in insertion order. Diagnostics only."""
        return list(self._cache.values())

    async def _resolve_from_store(self, team_id: str) -> TeamMapping | None:
        try:
            return await self._store.get(team_id)
        except InfrastructureError as exc:
            logger.warning(
                "team_registry_store_unavailable",
                extra={"team_id": team_id, "error_type": type(exc).__name__},
            )
            return None

    async def _resolve_from_inventory(self, team_id: str) -> TeamMapping | None:
        if self._inventory is None:
            return None
        try:
            instance = await self._inventory.find_by_team(team_id)
        except _INVENTORY_ERRORS as exc:
            logger.warning(
                "team_registry_inventory_unavailable",
                extra={"team_id": team_id, "error_type": type(exc).__name__},
            )
            return None
        if instance is None:
            return None
        logger.info(
            "team_registry_inventory_hit",
            extra={"team_id": team_id, "instance_id": instance.id},
        )
        return instance.to_team_mapping(self._domain_suffix)

    async def _collect_preload(self) -> dict[str, TeamMapping]:
        persisted = await self._persisted_mappings()
        if self._inventory is None:
            return persisted

        instances = await self._inventory.list_instances()
        return self._join_instances(instances, persisted)

    async def _persisted_mappings(self) -> dict[str, TeamMapping]:
        try:
            mappings = await self._store.list_all()
        except InfrastructureError as exc:
            logger.warning(
                "team_registry_store_unavailable",
                extra={"operation": "preload", "error_type": type(exc).__name__},
            )
            return {}
        return {mapping.team_id: mapping for mapping in mappings}

    def _join_instances(
        self,
        instances: list[Instance],
        persisted: dict[str, TeamMapping],
    ) -> dict[str, TeamMapping]:
        loaded: dict[str, TeamMapping] = {}
        for instance in instances:
            team_id = instance.team_id
            if team_id is None:
                continue
            mapping = persisted.get(team_id) or instance.to_team_mapping(self._domain_suffix)
            if mapping is not None:
                loaded[team_id] = mapping
        return loaded

    async def _label_instance(self, mapping: TeamMapping) -> None:
        labels = {
            TEAM_ID_LABEL: mapping.team_id,
            TEAM_NAME_LABEL: slugify_label_value(mapping.team_name),
        }
        try:
            await self._inventory.label_instance(mapping.instance_id, labels)  # type: ignore[union-attr]
        except _INVENTORY_ERRORS as exc:
            logger.warning(
                "instance_labels_update_failed",
                extra={
                    "instance_id": mapping.instance_id,
                    "error_type": type(exc).__name__,
                },
            )
