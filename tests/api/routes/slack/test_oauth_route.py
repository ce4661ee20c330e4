"""Tests for the Slack OAuth callback."""

from __future__ import annotations

import base64
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlencode, urlsplit

import pytest
from starlette.requests import Request

from api.connectors.slack.oauth_client import SlackInstallation, SlackOAuthError
from api.routes.slack import oauth
from app.infra.stores import MemoryTeamMappingStore
from app.services import TeamRegistry
from utils.errors import FirestoreUnavailableError


def _state_param(domain: str, instance_id: object = "42") -> str:
    raw = json.dumps({"domain": domain, "instanceId": instance_id}).encode()
    return base64.b64encode(raw).decode()


def _build_request(query: dict[str, str], state: SimpleNamespace) -> Request:
    query_string = urlencode(query)
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/api/slack/callback",
        "raw_path": b"/api/slack/callback",
        "query_string": query_string.encode("utf-8"),
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


def _location(response: object) -> tuple[str, dict[str, list[str]]]:
    parts = urlsplit(response.headers["location"])  # type: ignore[attr-defined]
    return parts.path, parse_qs(parts.query)


def _app_state(
    *,
    installation: SlackInstallation | None = None,
    exchange_error: Exception | None = None,
    store: MemoryTeamMappingStore | None = None,
) -> SimpleNamespace:
    oauth_client = AsyncMock()
    if exchange_error is not None:
        oauth_client.exchange_code.side_effect = exchange_error
    else:
        oauth_client.exchange_code.return_value = installation or SlackInstallation(
            access_token="xoxb-token",
            team_id="T1",
            team_name="Acme",
            bot_user_id="U1",
        )
    config_service = AsyncMock()
    config_service.configure_slack.return_value = True
    registry = TeamRegistry(store or MemoryTeamMappingStore(), domain_suffix="ds.jgiebz.com")
    return SimpleNamespace(
        slack_oauth_client=oauth_client,
        config_service_client=config_service,
        team_registry=registry,
    )


@pytest.fixture(autouse=True)
def _slack_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        oauth,
        "get_slack_settings",
        lambda: SimpleNamespace(oauth_configured=True),
    )


@pytest.mark.asyncio
async def test_successful_install_saves_mapping_and_configures_instance() -> None:
    state = _app_state()
    request = _build_request({"code": "abc", "state": _state_param("acme.ds.jgiebz.com")}, state)

    response = await oauth.oauth_callback(request)

    path, params = _location(response)
    assert response.status_code == 307
    assert path == "/setup/slack/success"
    assert params == {"team": ["Acme"], "domain": ["acme.ds.jgiebz.com"]}

    mapping = await state.team_registry.resolve("T1")
    assert mapping is not None
    assert mapping.domain == "acme.ds.jgiebz.com"
    assert mapping.instance_id == 42
    assert mapping.bot_token == "xoxb-token"
    state.config_service_client.configure_slack.assert_awaited_once_with(
        "acme.ds.jgiebz.com",
        bot_token="xoxb-token",
        team_id="T1",
        team_name="Acme",
        bot_user_id="U1",
    )


@pytest.mark.asyncio
async def test_missing_client_credentials_redirects(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(oauth, "get_slack_settings", lambda: SimpleNamespace(oauth_configured=False))

    response = await oauth.oauth_callback(_build_request({"code": "abc"}, _app_state()))

    assert _location(response) == ("/setup/slack", {"error": ["server_configuration"]})


@pytest.mark.asyncio
async def test_user_denial_is_forwarded() -> None:
    response = await oauth.oauth_callback(_build_request({"error": "access_denied"}, _app_state()))

    assert _location(response) == ("/setup/slack", {"error": ["access_denied"]})


@pytest.mark.asyncio
async def test_missing_code_redirects() -> None:
    response = await oauth.oauth_callback(_build_request({}, _app_state()))

    assert _location(response) == ("/setup/slack", {"error": ["missing_code"]})


@pytest.mark.asyncio
async def test_slack_error_is_forwarded() -> None:
    state = _app_state(exchange_error=SlackOAuthError("invalid_code"))

    response = await oauth.oauth_callback(_build_request({"code": "abc"}, state))

    assert _location(response) == ("/setup/slack", {"error": ["invalid_code"]})


@pytest.mark.asyncio
async def test_undecodable_state_skips_mapping() -> None:
    state = _app_state()

    response = await oauth.oauth_callback(_build_request({"code": "abc", "state": "%%%"}, state))

    path, params = _location(response)
    assert path == "/setup/slack/success"
    assert params == {"team": ["Acme"]}
    assert state.team_registry.list_cached() == []
    state.config_service_client.configure_slack.assert_not_called()


@pytest.mark.asyncio
async def test_store_failure_redirects_with_error() -> None:
    store = MemoryTeamMappingStore()
    store.upsert = AsyncMock(side_effect=FirestoreUnavailableError("down"))  # type: ignore[method-assign]
    state = _app_state(store=store)
    request = _build_request({"code": "abc", "state": _state_param("acme.ds.jgiebz.com")}, state)

    response = await oauth.oauth_callback(request)

    assert _location(response) == ("/setup/slack", {"error": ["down"]})
    state.config_service_client.configure_slack.assert_not_called()


class TestDecodeInstallState:
    def test_decodes_base64_json(self) -> None:
        decoded = oauth.decode_install_state(_state_param("acme.ds.jgiebz.com", 7))
        assert decoded == {"domain": "acme.ds.jgiebz.com", "instanceId": 7}

    def test_accepts_missing_padding(self) -> None:
        encoded = _state_param("a.b").rstrip("=")
        assert oauth.decode_install_state(encoded)["domain"] == "a.b"

    @pytest.mark.parametrize("state", [None, "", "not base64!", base64.b64encode(b"[1]").decode()])
    def test_invalid_state_yields_empty_dict(self, state: str | None) -> None:
        assert oauth.decode_install_state(state) == {}
