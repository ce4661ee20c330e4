"""Firestore settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    """Firestore settings.

    Attributes:
        project_id: GCP project id (falls back to GCP_PROJECT)
        collection_team_mappings: Collection holding team → instance mappings
    """

    project_id: str = ""
    collection_team_mappings: str = "slack_team_mappings"

    def validate(self, gcp_project: str) -> list[str]:
        errors: list[str] = []

        if not (self.project_id or gcp_project):
            errors.append("FIRESTORE_PROJECT_ID or GCP_PROJECT must be configured")

        if not self.collection_team_mappings:
            errors.append("FIRESTORE_COLLECTION_TEAM_MAPPINGS must not be empty")

        return errors


def _load_firestore_from_env() -> FirestoreSettings:
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        collection_team_mappings=os.getenv(
            "FIRESTORE_COLLECTION_TEAM_MAPPINGS", "slack_team_mappings"
        ),
    )


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Return the cached FirestoreSettings."""
    return _load_firestore_from_env()
