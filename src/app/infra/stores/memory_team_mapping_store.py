"""In-memory team mapping store - development and tests only.

Nothing survives a restart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.protocols.team_mapping_store import TeamMappingStoreProtocol

if TYPE_CHECKING:
    from app.domain.team_mapping import TeamMapping


class MemoryTeamMappingStore(TeamMappingStoreProtocol):
    """Dict-backed store."""

    def __init__(self) -> None:
        self._mappings: dict[str, TeamMapping] = {}

    async def get(self, team_id: str) -> TeamMapping | None:
        return self._mappings.get(team_id)

    async def upsert(self, mapping: TeamMapping) -> None:
        self._mappings[mapping.team_id] = mapping

    async def list_all(self) -> list[TeamMapping]:
        return list(self._mappings.values())
