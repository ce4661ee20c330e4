"""Contract for team mapping persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.domain.team_mapping import TeamMapping


@runtime_checkable
class TeamMappingStoreProtocol(Protocol):
    """Key-value store of TeamMapping keyed by team_id.

    Implementations write a mapping in a single operation and raise
    utils.errors.InfrastructureError subclasses on backend failures.
    """

    async def get(self, team_id: str) -> TeamMapping | None:
        """Return the mapping for team_id, or None."""
        ...

    async def upsert(self, mapping: TeamMapping) -> None:
        """Create or fully replace the mapping for mapping.team_id."""
        ...

    async def list_all(self) -> list[TeamMapping]:
        """Return every persisted mapping."""
        ...
