"""Client for the instance config service.

The config service pushes Slack credentials onto an instance after OAuth so
the instance can call the Slack API itself.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpClient, HttpClientConfig, HttpError

if TYPE_CHECKING:
    import httpx

    from config.settings import SlackSettings

logger = logging.getLogger(__name__)


class ConfigServiceClient(HttpClient):
    """POST {base_url}/configure-slack with a bearer secret."""

    def __init__(
        self,
        *,
        base_url: str,
        api_secret: str,
        config: HttpClientConfig | None = None,
    ) -> None:
        super().__init__(config)
        self._url = f"{base_url.rstrip('/')}/configure-slack"
        self._headers = {"Authorization": f"Bearer {api_secret}"}

    async def configure_slack(
        self,
        domain: str,
        *,
        bot_token: str,
        team_id: str,
        team_name: str | None,
        bot_user_id: str | None = None,
    ) -> bool:
        """Push Slack credentials to the instance at ``domain``.

        Returns:
            True when the service reports success; failures are logged.
        """
        if not domain:
            return False

        payload = {
            "domain": domain,
            "botToken": bot_token,
            "teamId": team_id,
            "teamName": team_name,
            "botUserId": bot_user_id,
        }
        try:
            response = await self.post(self._url, json=payload, headers=self._headers)
            result: dict[str, Any] = response.json()
        except (HttpError, ValueError) as exc:
            logger.error(
                "config_service_request_failed",
                extra={"domain": domain, "error_type": type(exc).__name__},
            )
            return False

        if response.is_success and result.get("success"):
            logger.info("config_service_slack_configured", extra={"domain": domain})
            return True

        logger.error(
            "config_service_rejected",
            extra={
                "domain": domain,
                "status_code": response.status_code,
                "error": str(result.get("error") or "unknown"),
            },
        )
        return False


def create_config_service_client(
    settings: SlackSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ConfigServiceClient | None:
    """Build the client, or None when CONFIG_SERVICE_URL/CONFIG_API_SECRET is unset."""
    from config.settings import get_slack_settings

    slack = settings or get_slack_settings()
    if not slack.config_service_url or not slack.config_api_secret:
        logger.warning("config_service_disabled", extra={"reason": "not_configured"})
        return None
    return ConfigServiceClient(
        base_url=slack.config_service_url,
        api_secret=slack.config_api_secret,
        config=HttpClientConfig(timeout_seconds=15.0, max_retries=1, transport=transport),
    )
