"""Redis team mapping store.

Each mapping is one JSON value under ``<prefix><team_id>``, written with a
single SET so readers never observe a partial mapping.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from app.domain.team_mapping import TeamMapping
from app.protocols.team_mapping_store import TeamMappingStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

TEAM_MAPPING_PREFIX = "team_mapping:"


class RedisTeamMappingStore(TeamMappingStoreProtocol):
    """Store backed by redis.asyncio.

    Args:
        async_redis_client: Async Redis client
        key_prefix: Namespace for mapping keys
    """

    def __init__(
        self,
        async_redis_client: AsyncRedis[bytes],
        key_prefix: str = TEAM_MAPPING_PREFIX,
    ) -> None:
        self._redis = async_redis_client
        self._prefix = key_prefix

    def _key(self, team_id: str) -> str:
        return f"{self._prefix}{team_id}"

    async def get(self, team_id: str) -> TeamMapping | None:
        try:
            raw = await self._redis.get(self._key(team_id))
        except Exception as exc:
            raise RedisConnectionError("Failed to read team mapping from Redis") from exc
        if raw is None:
            return None
        return self._decode(raw, team_id)

    async def upsert(self, mapping: TeamMapping) -> None:
        data = json.dumps(mapping.to_store_dict())
        try:
            await self._redis.set(self._key(mapping.team_id), data)
        except Exception as exc:
            raise RedisConnectionError("Failed to write team mapping to Redis") from exc
        logger.debug("team_mapping_saved", extra={"team_id": mapping.team_id, "backend": "redis"})

    async def list_all(self) -> list[TeamMapping]:
        mappings: list[TeamMapping] = []
        try:
            async for key in self._redis.scan_iter(match=f"{self._prefix}*"):
                raw = await self._redis.get(key)
                if raw is None:
                    continue
                team_id = _decode_key(key).removeprefix(self._prefix)
                mapping = self._decode(raw, team_id)
                if mapping is not None:
                    mappings.append(mapping)
        except Exception as exc:
            raise RedisConnectionError("Failed to list team mappings from Redis") from exc
        return mappings

    def _decode(self, raw: bytes | str, team_id: str) -> TeamMapping | None:
        try:
            return TeamMapping.from_store_dict(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning(
                "team_mapping_decode_failed",
                extra={"team_id": team_id, "error_type": type(exc).__name__},
            )
            return None


def _decode_key(key: bytes | str) -> str:
    return key.decode("utf-8") if isinstance(key, bytes) else key
