"""Instance - a provisioned server as reported by the inventory."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.domain.team_mapping import TeamMapping

TEAM_ID_LABEL = "slack-team-id"
TEAM_NAME_LABEL = "slack-team-name"
CLIENT_LABEL = "client"
SERVER_NAME_PREFIX = "deepsignal-"

# installed_at for servers the inventory reports without a creation time
UNKNOWN_INSTALL_TIME = datetime(1970, 1, 1, tzinfo=UTC)

_LABEL_VALUE_INVALID = re.compile(r"[^a-z0-9-]")
_LABEL_VALUE_MAX = 63


def slugify_label_value(value: str) -> str:
    """Lowercase, replace anything outside [a-z0-9-] with '-', cap at 63 chars."""
    return _LABEL_VALUE_INVALID.sub("-", value.lower())[:_LABEL_VALUE_MAX]


@dataclass(frozen=True, slots=True)
class Instance:
    """Server record with the labels the platform relies on."""

    id: int
    name: str
    labels: dict[str, str] = field(default_factory=dict)
    created: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Instance:
        created_raw = data.get("created")
        created = datetime.fromisoformat(created_raw) if created_raw else None
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            labels=dict(data.get("labels") or {}),
            created=created,
        )

    @property
    def team_id(self) -> str | None:
        return self.labels.get(TEAM_ID_LABEL) or None

    @property
    def team_name(self) -> str:
        return self.labels.get(TEAM_NAME_LABEL) or "Unknown"

    @property
    def client_slug(self) -> str:
        return self.labels.get(CLIENT_LABEL) or self.name.removeprefix(SERVER_NAME_PREFIX)

    def domain_for(self, suffix: str) -> str:
        return f"{self.client_slug}.{suffix}"

    def to_team_mapping(self, domain_suffix: str) -> TeamMapping | None:
        """Mapping derived from labels; tokens are never stored in labels."""
        if not self.team_id:
            return None
        return TeamMapping(
            team_id=self.team_id,
            team_name=self.team_name,
            domain=self.domain_for(domain_suffix),
            instance_id=self.id,
            bot_token="",
            installed_at=self.created or UNKNOWN_INSTALL_TIME,
        )
