"""Domain models."""

from app.domain.instance import Instance, slugify_label_value
from app.domain.team_mapping import TeamMapping

__all__ = [
    "Instance",
    "TeamMapping",
    "slugify_label_value",
]
