"""Tests for the Slack events endpoint."""

from __future__ import annotations

import asyncio
import json
import time
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from starlette.requests import Request

from api.connectors.slack.signature import compute_slack_signature
from api.routes.slack import events, events_runtime_tasks
from app.domain.team_mapping import TeamMapping
from app.infra.hetzner import HetznerInventoryClient
from app.infra.http import HttpClientConfig
from app.infra.stores import MemoryTeamMappingStore
from app.services import ForwardResult, TeamRegistry

SECRET = "test-signing-secret"


class _RecordingForwarder:
    def __init__(self, delay: float = 0.0, result: ForwardResult | None = None) -> None:
        self.calls: list[tuple[str, Any, dict[str, str]]] = []
        self.done = asyncio.Event()
        self._delay = delay
        self._result = result or ForwardResult(success=True)

    async def forward(self, domain: str, event: Any, headers: dict[str, str]) -> ForwardResult:
        self.calls.append((domain, event, dict(headers)))
        if self._delay:
            await asyncio.sleep(self._delay)
        self.done.set()
        return self._result


def _build_request(
    *,
    body: bytes,
    headers: dict[str, str] | None = None,
    state: SimpleNamespace | None = None,
) -> Request:
    header_items = headers or {}
    raw_headers = [(k.lower().encode("utf-8"), v.encode("utf-8")) for k, v in header_items.items()]
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "path": "/api/slack/events",
        "raw_path": b"/api/slack/events",
        "query_string": b"",
        "headers": raw_headers,
        "app": SimpleNamespace(state=state or SimpleNamespace()),
    }
    sent = False

    async def _receive() -> dict[str, object]:
        nonlocal sent
        if sent:
            return {"type": "http.request", "body": b"", "more_body": False}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, _receive)


def _signed_headers(body: bytes, *, timestamp: int | None = None) -> dict[str, str]:
    ts = str(int(time.time()) if timestamp is None else timestamp)
    return {
        "X-Slack-Signature": compute_slack_signature(body, ts, SECRET),
        "X-Slack-Request-Timestamp": ts,
        "Content-Type": "application/json",
    }


def _payload(response: Any) -> dict[str, Any]:
    if isinstance(response, dict):
        return response
    return json.loads(response.body.decode("utf-8"))


async def _state(forwarder: _RecordingForwarder, *mappings: TeamMapping) -> SimpleNamespace:
    registry = TeamRegistry(MemoryTeamMappingStore(), domain_suffix="ds.jgiebz.com")
    for mapping in mappings:
        await registry.save(mapping)
    return SimpleNamespace(team_registry=registry, event_forwarder=forwarder)


@pytest.fixture(autouse=True)
def _slack_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        events,
        "get_slack_settings",
        lambda: SimpleNamespace(signing_secret=SECRET, signature_tolerance_seconds=300),
    )


@pytest.fixture(autouse=True)
async def _cleanup_active_tasks() -> None:
    yield
    for task in list(events_runtime_tasks._active_tasks):
        task.cancel()
    if events_runtime_tasks._active_tasks:
        await asyncio.gather(*list(events_runtime_tasks._active_tasks), return_exceptions=True)
    events_runtime_tasks._active_tasks.clear()


@pytest.mark.asyncio
async def test_get_events_reports_status() -> None:
    payload = await events.events_status()

    assert payload["status"] == "ok"
    assert payload["message"] == "Slack events endpoint"
    assert "timestamp" in payload


@pytest.mark.asyncio
async def test_url_verification_skips_signature() -> None:
    body = b'{"type": "url_verification", "challenge": "abc123"}'
    request = _build_request(body=body)

    response = await events.receive_event(request)

    assert response == {"challenge": "abc123"}


@pytest.mark.asyncio
async def test_invalid_json_returns_400() -> None:
    request = _build_request(body=b"{not json", headers=_signed_headers(b"{not json"))

    response = await events.receive_event(request)

    assert response.status_code == 400
    assert _payload(response) == {"error": "Invalid JSON"}


@pytest.mark.asyncio
async def test_non_object_json_returns_400() -> None:
    request = _build_request(body=b"[1, 2]")

    response = await events.receive_event(request)

    assert response.status_code == 400
    assert _payload(response) == {"error": "Invalid JSON"}


@pytest.mark.asyncio
async def test_missing_signature_returns_401() -> None:
    forwarder = _RecordingForwarder()
    body = b'{"type": "event_callback", "team_id": "T1"}'
    request = _build_request(body=body, state=await _state(forwarder))

    response = await events.receive_event(request)

    assert response.status_code == 401
    assert _payload(response) == {"error": "Invalid signature"}
    assert forwarder.calls == []


@pytest.mark.asyncio
async def test_replayed_request_returns_401() -> None:
    forwarder = _RecordingForwarder()
    body = b'{"type": "event_callback", "team_id": "T1"}'
    headers = _signed_headers(body, timestamp=int(time.time()) - 301)
    request = _build_request(body=body, headers=headers, state=await _state(forwarder))

    response = await events.receive_event(request)

    assert response.status_code == 401
    assert forwarder.calls == []


@pytest.mark.asyncio
async def test_unconfigured_secret_rejects_events(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        events,
        "get_slack_settings",
        lambda: SimpleNamespace(signing_secret="", signature_tolerance_seconds=300),
    )
    body = b'{"type": "event_callback", "team_id": "T1"}'
    request = _build_request(body=body, headers=_signed_headers(body))

    response = await events.receive_event(request)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_event_without_team_is_acknowledged_with_warning() -> None:
    forwarder = _RecordingForwarder()
    body = b'{"type": "event_callback", "event": {"type": "message"}}'
    request = _build_request(body=body, headers=_signed_headers(body), state=await _state(forwarder))

    response = await events.receive_event(request)

    assert response == {"ok": True, "warning": "No team_id"}
    assert forwarder.calls == []


@pytest.mark.asyncio
async def test_unknown_team_is_acknowledged_with_warning() -> None:
    forwarder = _RecordingForwarder()
    body = b'{"type": "event_callback", "team_id": "T-unknown"}'
    request = _build_request(body=body, headers=_signed_headers(body), state=await _state(forwarder))

    response = await events.receive_event(request)

    assert response == {"ok": True, "warning": "Unknown team"}
    assert forwarder.calls == []
    assert len(events_runtime_tasks._active_tasks) == 0


@pytest.mark.asyncio
async def test_known_team_is_forwarded_with_signature_headers() -> None:
    forwarder = _RecordingForwarder()
    mapping = TeamMapping(team_id="T1", team_name="Acme", domain="acme.ds.jgiebz.com")
    body = b'{"type": "event_callback", "team": {"id": "T1"}, "event": {"type": "app_mention"}}'
    headers = _signed_headers(body)
    request = _build_request(body=body, headers=headers, state=await _state(forwarder, mapping))

    response = await events.receive_event(request)

    assert response == {"ok": True}
    await asyncio.wait_for(forwarder.done.wait(), timeout=1.0)
    domain, event, forwarded_headers = forwarder.calls[0]
    assert domain == "acme.ds.jgiebz.com"
    assert event["event"] == {"type": "app_mention"}
    assert forwarded_headers == {
        "x-slack-signature": headers["X-Slack-Signature"],
        "x-slack-request-timestamp": headers["X-Slack-Request-Timestamp"],
    }


@pytest.mark.asyncio
async def test_slow_instance_does_not_delay_acknowledgement() -> None:
    forwarder = _RecordingForwarder(delay=10.0)
    mapping = TeamMapping(team_id="T1", domain="slow.ds.jgiebz.com")
    body = b'{"type": "event_callback", "team_id": "T1"}'
    request = _build_request(body=body, headers=_signed_headers(body), state=await _state(forwarder, mapping))

    response = await asyncio.wait_for(events.receive_event(request), timeout=1.0)

    assert response == {"ok": True}
    assert len(events_runtime_tasks._active_tasks) == 1
    assert not forwarder.done.is_set()


@pytest.mark.asyncio
async def test_failed_forward_is_logged_only(caplog: pytest.LogCaptureFixture) -> None:
    forwarder = _RecordingForwarder(result=ForwardResult(success=False, error="Timeout"))
    mapping = TeamMapping(team_id="T1", domain="acme.ds.jgiebz.com")
    body = b'{"type": "event_callback", "team_id": "T1"}'
    request = _build_request(body=body, headers=_signed_headers(body), state=await _state(forwarder, mapping))

    with caplog.at_level("WARNING"):
        response = await events.receive_event(request)
        await events_runtime_tasks.drain_forwarding_tasks(timeout_seconds=1.0)

    assert response == {"ok": True}
    assert "slack_event_forward_failed" in caplog.text


@pytest.mark.asyncio
async def test_inventory_connection_reset_is_acknowledged() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadError("connection reset by peer", request=request)

    inventory = HetznerInventoryClient(
        "token",
        base_url="https://api.hetzner.test/v1",
        managed_label_selector="managed-by=deep-signal",
        config=HttpClientConfig(max_retries=0, transport=httpx.MockTransport(_handler)),
    )
    forwarder = _RecordingForwarder()
    state = SimpleNamespace(
        team_registry=TeamRegistry(MemoryTeamMappingStore(), inventory, domain_suffix="ds.jgiebz.com"),
        event_forwarder=forwarder,
    )
    body = b'{"type": "event_callback", "team_id": "T1"}'
    request = _build_request(body=body, headers=_signed_headers(body), state=state)

    response = await events.receive_event(request)

    assert response == {"ok": True, "warning": "Unknown team"}
    assert forwarder.calls == []
