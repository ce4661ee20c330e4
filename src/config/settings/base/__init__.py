"""Base settings re-exports."""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
    parse_environment,
)
from config.settings.base.registry import (
    RegistrySettings,
    TeamMappingBackend,
    get_registry_settings,
)

__all__ = [
    "BaseSettings",
    "Environment",
    "RegistrySettings",
    "TeamMappingBackend",
    "get_base_settings",
    "get_registry_settings",
    "parse_environment",
]
