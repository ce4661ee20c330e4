"""Firestore team mapping store.

One document per team, id = team_id. ``set()`` without merge replaces the
whole document, which gives last-write-wins upserts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.domain.team_mapping import TeamMapping
from app.protocols.team_mapping_store import TeamMappingStoreProtocol
from utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

TEAM_MAPPINGS_COLLECTION = "slack_team_mappings"


class FirestoreTeamMappingStore(TeamMappingStoreProtocol):
    """Store backed by the synchronous Firestore client, run in a thread."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str = TEAM_MAPPINGS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection

    async def get(self, team_id: str) -> TeamMapping | None:
        return await asyncio.to_thread(self._get_sync, team_id)

    async def upsert(self, mapping: TeamMapping) -> None:
        await asyncio.to_thread(self._upsert_sync, mapping)

    async def list_all(self) -> list[TeamMapping]:
        return await asyncio.to_thread(self._list_all_sync)

    def _get_sync(self, team_id: str) -> TeamMapping | None:
        try:
            doc = self._db.collection(self._collection).document(team_id).get()
        except Exception as exc:
            raise FirestoreUnavailableError("Failed to read team mapping") from exc
        if not doc.exists:
            return None
        return _decode(doc.to_dict() or {}, team_id)

    def _upsert_sync(self, mapping: TeamMapping) -> None:
        try:
            self._db.collection(self._collection).document(mapping.team_id).set(
                mapping.to_store_dict()
            )
        except Exception as exc:
            raise FirestoreUnavailableError("Failed to write team mapping") from exc
        logger.debug(
            "team_mapping_saved",
            extra={"team_id": mapping.team_id, "backend": "firestore"},
        )

    def _list_all_sync(self) -> list[TeamMapping]:
        try:
            docs = list(self._db.collection(self._collection).stream())
        except Exception as exc:
            raise FirestoreUnavailableError("Failed to list team mappings") from exc
        mappings: list[TeamMapping] = []
        for doc in docs:
            mapping = _decode(doc.to_dict() or {}, doc.id)
            if mapping is not None:
                mappings.append(mapping)
        return mappings


def _decode(data: dict[str, Any], team_id: str) -> TeamMapping | None:
    try:
        return TeamMapping.from_store_dict(data)
    except ValidationError:
        logger.warning("team_mapping_decode_failed", extra={"team_id": team_id})
        return None
