"""Slack OAuth v2 token exchange.

Reference: https://api.slack.com/methods/oauth.v2.access
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpClient, HttpClientConfig

if TYPE_CHECKING:
    import httpx

    from config.settings import SlackSettings

logger = logging.getLogger(__name__)


class SlackOAuthError(Exception):
    """Slack rejected the exchange; ``error_code`` is Slack's error string."""

    def __init__(self, error_code: str) -> None:
        super().__init__(error_code)
        self.error_code = error_code


@dataclass(frozen=True, slots=True)
class SlackInstallation:
    """Result of a successful installation. ``access_token`` is secret."""

    access_token: str = field(repr=False)
    team_id: str | None
    team_name: str | None
    bot_user_id: str | None


class SlackOAuthClient(HttpClient):
    """Exchanges an OAuth ``code`` for a bot token."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        access_url: str,
        config: HttpClientConfig | None = None,
    ) -> None:
        super().__init__(config)
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._access_url = access_url

    async def exchange_code(self, code: str) -> SlackInstallation:
        """Exchange ``code`` for an installation.

        Raises:
            SlackOAuthError: If Slack answers ``ok: false`` or a non-JSON body
            HttpError: On transport failure
        """
        form = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "code": code,
        }
        if self._redirect_uri:
            form["redirect_uri"] = self._redirect_uri

        response = await self.post(self._access_url, data=form)
        try:
            body: dict[str, Any] = response.json()
        except ValueError as exc:
            raise SlackOAuthError("invalid_response") from exc

        if not body.get("ok"):
            error_code = str(body.get("error") or "unknown_error")
            logger.warning("slack_oauth_exchange_failed", extra={"error_code": error_code})
            raise SlackOAuthError(error_code)

        team = body.get("team") or {}
        installation = SlackInstallation(
            access_token=str(body.get("access_token") or ""),
            team_id=team.get("id"),
            team_name=team.get("name"),
            bot_user_id=body.get("bot_user_id"),
        )
        logger.info(
            "slack_oauth_exchange_succeeded",
            extra={
                "team_id": installation.team_id,
                "team_name": installation.team_name,
                "bot_user_id": installation.bot_user_id,
            },
        )
        return installation


def create_slack_oauth_client(
    settings: SlackSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SlackOAuthClient:
    """Build the OAuth client from SlackSettings (no retries: codes are single-use)."""
    from config.settings import get_slack_settings

    slack = settings or get_slack_settings()
    return SlackOAuthClient(
        client_id=slack.client_id,
        client_secret=slack.client_secret,
        redirect_uri=slack.redirect_uri,
        access_url=slack.oauth_access_url,
        config=HttpClientConfig(timeout_seconds=10.0, max_retries=0, transport=transport),
    )
