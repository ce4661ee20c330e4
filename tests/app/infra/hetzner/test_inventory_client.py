"""Tests for the Hetzner inventory client."""

from __future__ import annotations

import json

import httpx
import pytest

from app.infra.hetzner import HetznerInventoryClient, create_hetzner_inventory_client
from app.infra.http import HttpClientConfig, HttpError
from config.settings import HetznerSettings

BASE_URL = "https://api.hetzner.test/v1"


def _server(server_id: int, name: str, **labels: str) -> dict[str, object]:
    return {
        "id": server_id,
        "name": name,
        "labels": labels,
        "created": "2026-01-10T08:00:00+00:00",
    }


def _client(handler) -> HetznerInventoryClient:  # type: ignore[no-untyped-def]
    return HetznerInventoryClient(
        "hz-token",
        base_url=BASE_URL,
        managed_label_selector="managed-by=deep-signal",
        config=HttpClientConfig(max_retries=0, transport=httpx.MockTransport(handler)),
    )


def test_factory_returns_none_without_token() -> None:
    assert create_hetzner_inventory_client(HetznerSettings(api_token="")) is None


def test_constructor_rejects_blank_token() -> None:
    with pytest.raises(ValueError):
        HetznerInventoryClient("  ", base_url=BASE_URL, managed_label_selector="x=y")


@pytest.mark.asyncio
async def test_list_instances_follows_pagination() -> None:
    seen: list[dict[str, str]] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == "Bearer hz-token"
        params = dict(request.url.params)
        seen.append(params)
        if params["page"] == "1":
            return httpx.Response(
                200,
                json={
                    "servers": [_server(1, "deepsignal-acme", **{"slack-team-id": "T1"})],
                    "meta": {"pagination": {"next_page": 2}},
                },
            )
        return httpx.Response(
            200,
            json={
                "servers": [_server(2, "deepsignal-beta")],
                "meta": {"pagination": {"next_page": None}},
            },
        )

    instances = await _client(_handler).list_instances()

    assert [instance.id for instance in instances] == [1, 2]
    assert instances[0].team_id == "T1"
    assert instances[1].team_id is None
    assert [params["page"] for params in seen] == ["1", "2"]
    assert all(params["label_selector"] == "managed-by=deep-signal" for params in seen)


@pytest.mark.asyncio
async def test_find_by_team_uses_label_selector() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["label_selector"] == "slack-team-id=T9"
        return httpx.Response(
            200,
            json={
                "servers": [_server(9, "deepsignal-nine", **{"slack-team-id": "T9"})],
                "meta": {"pagination": {"next_page": 2}},
            },
        )

    instance = await _client(_handler).find_by_team("T9")

    assert instance is not None
    assert instance.id == 9
    assert instance.domain_for("ds.jgiebz.com") == "nine.ds.jgiebz.com"


@pytest.mark.asyncio
async def test_find_by_team_without_match() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"servers": []})

    assert await _client(_handler).find_by_team("T404") is None


@pytest.mark.asyncio
async def test_label_instance_merges_existing_labels() -> None:
    put_bodies: list[dict[str, object]] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/servers/42"
        if request.method == "GET":
            return httpx.Response(
                200,
                json={"server": {"id": 42, "labels": {"managed-by": "deep-signal", "client": "acme"}}},
            )
        put_bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"server": {"id": 42}})

    await _client(_handler).label_instance(42, {"slack-team-id": "T1"})

    assert put_bodies == [
        {"labels": {"managed-by": "deep-signal", "client": "acme", "slack-team-id": "T1"}}
    ]


@pytest.mark.asyncio
async def test_error_status_raises_http_error() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"code": "unauthorized"}})

    with pytest.raises(HttpError) as exc_info:
        await _client(_handler).list_instances()

    assert exc_info.value.status_code == 401
