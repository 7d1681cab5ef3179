"""Tests for container wiring."""

import asyncio

from healer.config import Settings
from healer.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.session_service is not None
    assert container.recommendation_service.model == "test-model"
    assert container.recommendation_service.reasoning_effort == "low"
    assert container.session_service.recommendation_service is (
        container.recommendation_service
    )
    asyncio.run(container.close_resources())


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("OPENAI_MODEL", "env-model")
    monkeypatch.setenv("OPENAI_STORE", "true")

    settings = Settings()

    assert settings.openai_api_key == "env-key"
    assert settings.openai_model == "env-model"
    assert settings.openai_store is True


def test_settings_read_session_ttl(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("SESSION_TTL_SECONDS", "120")

    settings = Settings()

    assert settings.session_ttl_seconds == 120
