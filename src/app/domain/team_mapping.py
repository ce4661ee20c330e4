"""TeamMapping - routes a Slack workspace to the instance serving it.

The bot token is a credential: it is excluded from repr and from the public
view, and must never be passed to a logger.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TeamMapping(BaseModel):
    """Slack team → instance mapping, keyed by ``team_id``."""

    model_config = ConfigDict(frozen=True)

    team_id: str = Field(..., min_length=1, description="Slack team (workspace) id")
    team_name: str = Field(default="Unknown", description="Workspace display name")
    domain: str = Field(..., min_length=1, description="FQDN of the instance")
    instance_id: int = Field(default=0, ge=0, description="Compute instance id, 0 if unknown")
    bot_token: str = Field(default="", repr=False, description="Slack bot token (secret)")
    installed_at: datetime = Field(default_factory=_utcnow)

    def to_store_dict(self) -> dict[str, Any]:
        """Full JSON-compatible document for persistence (includes the token)."""
        return self.model_dump(mode="json")

    @classmethod
    def from_store_dict(cls, data: dict[str, Any]) -> TeamMapping:
        return cls.model_validate(data)

    def to_public_dict(self, *, include_installed_at: bool = True) -> dict[str, Any]:
        """View for diagnostics responses; never contains the token."""
        public: dict[str, Any] = {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "domain": self.domain,
        }
        if include_installed_at:
            public["installedAt"] = self.installed_at.isoformat()
        return public
