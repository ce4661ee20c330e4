"""Slack integration settings.

Covers event relay (signing secret, forwarding limits) and the OAuth
installation flow (client credentials, config service).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

SLACK_OAUTH_ACCESS_URL: str = "https://slack.com/api/oauth.v2.access"
SIGNATURE_TOLERANCE_SECONDS: int = 300
FORWARD_TIMEOUT_SECONDS: float = 5.0


@dataclass(frozen=True)
class SlackSettings:
    """Slack settings.

    Attributes:
        signing_secret: Shared secret used to verify event signatures.
            Required; there is no default.
        client_id: OAuth client id
        client_secret: OAuth client secret
        redirect_uri: OAuth redirect URI registered with Slack
        oauth_access_url: Token exchange endpoint
        forward_timeout_seconds: Hard timeout on the relay to an instance
        forward_path: Path on the instance that receives relayed events
        signature_tolerance_seconds: Replay window for request timestamps
        max_concurrent_forwards: Cap on in-flight relay tasks
        shutdown_grace_seconds: Time given to pending relays at shutdown
        config_service_url: Base URL of the instance config service
        config_api_secret: Bearer token for the config service
    """

    signing_secret: str = ""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    oauth_access_url: str = SLACK_OAUTH_ACCESS_URL

    forward_timeout_seconds: float = FORWARD_TIMEOUT_SECONDS
    forward_path: str = "/slack/events"
    signature_tolerance_seconds: int = SIGNATURE_TOLERANCE_SECONDS
    max_concurrent_forwards: int = 100
    shutdown_grace_seconds: float = 0.0

    config_service_url: str = ""
    config_api_secret: str = ""

    @property
    def oauth_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def validate(self) -> list[str]:
        errors: list[str] = []

        if not self.signing_secret:
            errors.append("SLACK_SIGNING_SECRET not configured")

        if not self.oauth_configured:
            errors.append("SLACK_CLIENT_ID/SLACK_CLIENT_SECRET not configured")

        if self.forward_timeout_seconds <= 0:
            errors.append("SLACK_FORWARD_TIMEOUT_SECONDS must be > 0")

        if not self.forward_path.startswith("/"):
            errors.append("SLACK_FORWARD_PATH must start with '/'")

        if self.signature_tolerance_seconds <= 0:
            errors.append("SLACK_SIGNATURE_TOLERANCE_SECONDS must be > 0")

        if self.max_concurrent_forwards < 1:
            errors.append("SLACK_MAX_CONCURRENT_FORWARDS must be >= 1")

        if self.shutdown_grace_seconds < 0:
            errors.append("SLACK_SHUTDOWN_GRACE_SECONDS must be >= 0")

        if self.config_service_url and not self.config_api_secret:
            errors.append("CONFIG_API_SECRET is required when CONFIG_SERVICE_URL is set")

        return errors


def _load_from_env() -> SlackSettings:
    return SlackSettings(
        signing_secret=os.getenv("SLACK_SIGNING_SECRET", ""),
        client_id=os.getenv("SLACK_CLIENT_ID", ""),
        client_secret=os.getenv("SLACK_CLIENT_SECRET", ""),
        redirect_uri=os.getenv("SLACK_REDIRECT_URI", ""),
        oauth_access_url=os.getenv("SLACK_OAUTH_ACCESS_URL", SLACK_OAUTH_ACCESS_URL),
        forward_timeout_seconds=float(
            os.getenv("SLACK_FORWARD_TIMEOUT_SECONDS", str(FORWARD_TIMEOUT_SECONDS))
        ),
        forward_path=os.getenv("SLACK_FORWARD_PATH", "/slack/events"),
        signature_tolerance_seconds=int(
            os.getenv("SLACK_SIGNATURE_TOLERANCE_SECONDS", str(SIGNATURE_TOLERANCE_SECONDS))
        ),
        max_concurrent_forwards=int(os.getenv("SLACK_MAX_CONCURRENT_FORWARDS", "100")),
        shutdown_grace_seconds=float(os.getenv("SLACK_SHUTDOWN_GRACE_SECONDS", "0")),
        config_service_url=os.getenv("CONFIG_SERVICE_URL", "").rstrip("/"),
        config_api_secret=os.getenv("CONFIG_API_SECRET", ""),
    )


@lru_cache(maxsize=1)
def get_slack_settings() -> SlackSettings:
    """Return the cached SlackSettings."""
    return _load_from_env()
