"""Base settings shared by every component."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]


@dataclass(frozen=True)
class BaseSettings:
    """Process-wide settings.

    Attributes:
        environment: development | staging | production
        service_name: Name stamped on logs
        debug: Debug mode
        gcp_project: GCP project (Firestore backend)
        redis_url: Redis connection URL (Redis backend)
    """

    environment: Environment = "development"
    service_name: str = "deep-signal-platform"
    debug: bool = False
    gcp_project: str = ""
    redis_url: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Return validation errors (empty list means valid)."""
        errors: list[str] = []

        if self.environment not in ("development", "staging", "production"):
            errors.append(f"ENVIRONMENT invalid: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME must not be empty")

        return errors


def parse_environment(env_str: str) -> Environment:
    """Normalise ENVIRONMENT aliases (prod, stage, dev, test)."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def _load_base_from_env() -> BaseSettings:
    return BaseSettings(
        environment=parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "deep-signal-platform"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        gcp_project=os.getenv("GCP_PROJECT", os.getenv("GOOGLE_CLOUD_PROJECT", "")),
        redis_url=os.getenv("REDIS_URL", ""),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Return the cached BaseSettings."""
    return _load_base_from_env()
