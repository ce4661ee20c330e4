"""Stores - concrete persistence for team mappings.

- memory_team_mapping_store: dict-backed, dev/test only
- redis_team_mapping_store: Redis (one JSON value per team)
- firestore_team_mapping_store: Firestore (one document per team)
"""

from __future__ import annotations

from app.infra.stores.firestore_team_mapping_store import FirestoreTeamMappingStore
from app.infra.stores.memory_team_mapping_store import MemoryTeamMappingStore
from app.infra.stores.redis_team_mapping_store import RedisTeamMappingStore

__all__ = [
    "FirestoreTeamMappingStore",
    "MemoryTeamMappingStore",
    "RedisTeamMappingStore",
]
