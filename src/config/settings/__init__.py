"""Settings for the Deep Signal platform.

One module per concern; each exposes a frozen dataclass, a cached getter and
``validate() -> list[str]``.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    RegistrySettings,
    TeamMappingBackend,
    get_base_settings,
    get_registry_settings,
)
from config.settings.hetzner import (
    HETZNER_API_BASE_URL,
    INSTANCE_DOMAIN_SUFFIX,
    HetznerSettings,
    get_hetzner_settings,
)
from config.settings.infra import (
    FirestoreSettings,
    get_firestore_settings,
)
from config.settings.slack import (
    SLACK_OAUTH_ACCESS_URL,
    SlackSettings,
    get_slack_settings,
)

__all__ = [
    "HETZNER_API_BASE_URL",
    "INSTANCE_DOMAIN_SUFFIX",
    "SLACK_OAUTH_ACCESS_URL",
    "BaseSettings",
    "Environment",
    "FirestoreSettings",
    "HetznerSettings",
    "RegistrySettings",
    "SlackSettings",
    "TeamMappingBackend",
    "get_base_settings",
    "get_firestore_settings",
    "get_hetzner_settings",
    "get_registry_settings",
    "get_slack_settings",
]
