"""Contract for the provisioned-instance inventory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.instance import Instance


class InstanceInventoryProtocol(Protocol):
    """Lists and labels the servers provisioned for customers."""

    async def list_instances(self) -> list[Instance]: ...

    async def find_by_team(self, team_id: str) -> Instance | None: ...

    async def label_instance(self, instance_id: int, labels: dict[str, str]) -> None: ...
