"""Hetzner Cloud settings (instance inventory)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

HETZNER_API_BASE_URL: str = "https://api.hetzner.cloud/v1"
INSTANCE_DOMAIN_SUFFIX: str = "ds.jgiebz.com"
MANAGED_LABEL_SELECTOR: str = "managed-by=deep-signal"


@dataclass(frozen=True)
class HetznerSettings:
    """Inventory settings.

    Attributes:
        api_token: Hetzner Cloud API token; inventory is disabled when empty
        api_base_url: API root
        domain_suffix: Suffix appended to an instance's client slug
        managed_label_selector: Selects servers provisioned by the platform
        request_timeout_seconds: Per-request timeout
        max_retries: Retries on 429/5xx/connection errors
    """

    api_token: str = ""
    api_base_url: str = HETZNER_API_BASE_URL
    domain_suffix: str = INSTANCE_DOMAIN_SUFFIX
    managed_label_selector: str = MANAGED_LABEL_SELECTOR
    request_timeout_seconds: float = 10.0
    max_retries: int = 2

    @property
    def enabled(self) -> bool:
        return bool(self.api_token)

    def validate(self) -> list[str]:
        errors: list[str] = []

        if not self.api_token:
            errors.append("HETZNER_API_TOKEN not configured")

        if not self.domain_suffix:
            errors.append("INSTANCE_DOMAIN_SUFFIX must not be empty")

        if self.request_timeout_seconds <= 0:
            errors.append("HETZNER_REQUEST_TIMEOUT_SECONDS must be > 0")

        if self.max_retries < 0:
            errors.append("HETZNER_MAX_RETRIES must be >= 0")

        return errors


def _load_from_env() -> HetznerSettings:
    return HetznerSettings(
        api_token=os.getenv("HETZNER_API_TOKEN", ""),
        api_base_url=os.getenv("HETZNER_API_BASE_URL", HETZNER_API_BASE_URL).rstrip("/"),
        domain_suffix=os.getenv("INSTANCE_DOMAIN_SUFFIX", INSTANCE_DOMAIN_SUFFIX),
        managed_label_selector=os.getenv(
            "HETZNER_MANAGED_LABEL_SELECTOR", MANAGED_LABEL_SELECTOR
        ),
        request_timeout_seconds=float(os.getenv("HETZNER_REQUEST_TIMEOUT_SECONDS", "10")),
        max_retries=int(os.getenv("HETZNER_MAX_RETRIES", "2")),
    )


@lru_cache(maxsize=1)
def get_hetzner_settings() -> HetznerSettings:
    """Return the cached HetznerSettings."""
    return _load_from_env()
