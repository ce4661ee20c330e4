"""Connectors - edge adapters for external platforms.

- slack/: Slack Events API signatures, OAuth exchange
- config_service/: instance configuration service
"""

__all__: list[str] = []
