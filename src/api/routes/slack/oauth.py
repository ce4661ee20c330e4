"""Slack OAuth install callback.

Flow:
1. Slack redirects here with ``code`` and our ``state``
2. ``state`` carries the target instance as base64 JSON
3. The code is exchanged for a bot token
4. The team mapping is saved and the token is pushed to the instance
5. The browser is redirected to the setup pages
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from api.connectors.slack.oauth_client import SlackOAuthError
from app.domain.team_mapping import TeamMapping
from config.settings import get_slack_settings

if TYPE_CHECKING:
    from api.connectors.config_service import ConfigServiceClient
    from api.connectors.slack.oauth_client import SlackOAuthClient
    from app.services import TeamRegistry

logger = logging.getLogger(__name__)

router = APIRouter()

SETUP_PATH = "/setup/slack"
SUCCESS_PATH = "/setup/slack/success"


def decode_install_state(state: str | None) -> dict[str, Any]:
    """Decode ``state`` (base64 JSON). Undecodable state yields an empty dict."""
    if not state:
        return {}
    try:
        padded = state + "=" * (-len(state) % 4)
        decoded = json.loads(base64.b64decode(padded).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        logger.warning("slack_oauth_state_invalid", extra={"error_type": type(exc).__name__})
        return {}
    if not isinstance(decoded, dict):
        logger.warning("slack_oauth_state_invalid", extra={"error_type": "not_object"})
        return {}
    return decoded


def _parse_instance_id(raw: Any) -> int:
    try:
        return max(int(raw), 0)
    except (TypeError, ValueError):
        return 0


def _redirect(path: str, **params: str) -> RedirectResponse:
    return RedirectResponse(url=f"{path}?{urlencode(params)}", status_code=307)


@router.get("/callback")
async def oauth_callback(request: Request) -> RedirectResponse:
    """Complete a Slack app installation."""
    settings = get_slack_settings()
    if not settings.oauth_configured:
        logger.error("slack_oauth_not_configured")
        return _redirect(SETUP_PATH, error="server_configuration")

    params = request.query_params
    error = params.get("error")
    if error:
        logger.warning("slack_oauth_denied", extra={"error_code": error})
        return _redirect(SETUP_PATH, error=error)

    code = params.get("code")
    if not code:
        return _redirect(SETUP_PATH, error="missing_code")

    install_state = decode_install_state(params.get("state"))
    domain = str(install_state.get("domain") or "")

    oauth_client: SlackOAuthClient = request.app.state.slack_oauth_client
    try:
        installation = await oauth_client.exchange_code(code)

        if installation.team_id and domain:
            registry: TeamRegistry = request.app.state.team_registry
            await registry.save(
                TeamMapping(
                    team_id=installation.team_id,
                    team_name=installation.team_name or "Unknown",
                    domain=domain,
                    instance_id=_parse_instance_id(install_state.get("instanceId")),
                    bot_token=installation.access_token,
                )
            )

            config_service: ConfigServiceClient | None = request.app.state.config_service_client
            if config_service is not None:
                await config_service.configure_slack(
                    domain,
                    bot_token=installation.access_token,
                    team_id=installation.team_id,
                    team_name=installation.team_name,
                    bot_user_id=installation.bot_user_id,
                )
    except SlackOAuthError as exc:
        return _redirect(SETUP_PATH, error=exc.error_code)
    except Exception as exc:
        logger.exception("slack_oauth_failed", extra={"error_type": type(exc).__name__})
        return _redirect(SETUP_PATH, error=str(exc) or type(exc).__name__)

    return _redirect(SUCCESS_PATH, team=installation.team_name or "Unknown", domain=domain)
