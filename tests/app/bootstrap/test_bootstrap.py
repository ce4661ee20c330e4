"""Tests for the composition root."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.bootstrap import collect_settings_errors, validate_runtime_settings
from app.bootstrap.dependencies import (
    create_event_forwarder,
    create_team_mapping_store,
    create_team_registry,
)
from app.infra.stores import (
    FirestoreTeamMappingStore,
    MemoryTeamMappingStore,
    RedisTeamMappingStore,
)
from app.services import EventForwarder, TeamRegistry
from config.settings import (
    get_base_settings,
    get_firestore_settings,
    get_hetzner_settings,
    get_registry_settings,
    get_slack_settings,
)

_GETTERS = (
    get_base_settings,
    get_firestore_settings,
    get_hetzner_settings,
    get_registry_settings,
    get_slack_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):  # type: ignore[no-untyped-def]
    for name in (
        "ENVIRONMENT",
        "TEAM_MAPPING_BACKEND",
        "REDIS_URL",
        "GCP_PROJECT",
        "GOOGLE_CLOUD_PROJECT",
        "FIRESTORE_PROJECT_ID",
        "HETZNER_API_TOKEN",
        "SLACK_SIGNING_SECRET",
        "SLACK_CLIENT_ID",
        "SLACK_CLIENT_SECRET",
        "CONFIG_SERVICE_URL",
        "CONFIG_API_SECRET",
    ):
        monkeypatch.delenv(name, raising=False)
    for getter in _GETTERS:
        getter.cache_clear()
    yield
    for getter in _GETTERS:
        getter.cache_clear()


def _set_valid_production_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("GCP_PROJECT", "deep-signal")
    monkeypatch.setenv("HETZNER_API_TOKEN", "hz")
    monkeypatch.setenv("SLACK_SIGNING_SECRET", "sig")
    monkeypatch.setenv("SLACK_CLIENT_ID", "id")
    monkeypatch.setenv("SLACK_CLIENT_SECRET", "secret")


class TestCreateTeamMappingStore:
    def test_memory_backend_by_default_in_development(self) -> None:
        assert isinstance(create_team_mapping_store(), MemoryTeamMappingStore)

    def test_redis_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEAM_MAPPING_BACKEND", "redis")

        store = create_team_mapping_store(redis_client=MagicMock())

        assert isinstance(store, RedisTeamMappingStore)

    def test_redis_backend_without_client_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEAM_MAPPING_BACKEND", "redis")

        with pytest.raises(ValueError):
            create_team_mapping_store()

    def test_firestore_backend_default_in_production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")

        store = create_team_mapping_store(firestore_client=MagicMock())

        assert isinstance(store, FirestoreTeamMappingStore)


def test_registry_and_forwarder_factories() -> None:
    registry = create_team_registry(MemoryTeamMappingStore())
    forwarder = create_event_forwarder()

    assert isinstance(registry, TeamRegistry)
    assert isinstance(forwarder, EventForwarder)
    assert forwarder.target_url("acme.ds.jgiebz.com") == "https://acme.ds.jgiebz.com/slack/events"


class TestValidateRuntimeSettings:
    def test_missing_signing_secret_is_reported(self) -> None:
        errors = collect_settings_errors()

        assert "slack: SLACK_SIGNING_SECRET not configured" in errors

    def test_development_only_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING"):
            validate_runtime_settings()

        assert "settings_validation_failed" in caplog.text

    def test_production_raises_on_missing_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _set_valid_production_env(monkeypatch)
        monkeypatch.delenv("SLACK_SIGNING_SECRET")

        with pytest.raises(RuntimeError, match="SLACK_SIGNING_SECRET"):
            validate_runtime_settings()

    def test_production_rejects_memory_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _set_valid_production_env(monkeypatch)
        monkeypatch.setenv("TEAM_MAPPING_BACKEND", "memory")

        with pytest.raises(RuntimeError, match="memory"):
            validate_runtime_settings()

    def test_valid_production_configuration_passes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _set_valid_production_env(monkeypatch)

        validate_runtime_settings()

        assert collect_settings_errors() == []
