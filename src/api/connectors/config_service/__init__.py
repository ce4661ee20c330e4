"""Instance config service connector."""

from .client import ConfigServiceClient, create_config_service_client

__all__ = [
    "ConfigServiceClient",
    "create_config_service_client",
]
