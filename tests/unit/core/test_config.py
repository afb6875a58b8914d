"""Tests for cruiseexporter.core.config - Settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cruiseexporter.core.config import DEFAULT_USER_AGENT, Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for name in ("URLS", "POLL_INTERVAL", "PAGE_SIZE", "NAMESPACE", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"CRUISE_EXPORTER_{name}", raising=False)


def test_defaults() -> None:
    settings = Settings()

    assert settings.urls == []
    assert settings.poll_interval == 300.0
    assert settings.page_size == 20
    assert settings.namespace == "royal"
    assert settings.listen_port == 9110
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.request_timeout is None
    assert settings.log_format == "console"


def test_env_prefix(monkeypatch) -> None:
    monkeypatch.setenv("CRUISE_EXPORTER_URLS", '["https://a.example.com/graph", " https://b.example.com/graph "]')
    monkeypatch.setenv("CRUISE_EXPORTER_POLL_INTERVAL", "60")
    monkeypatch.setenv("CRUISE_EXPORTER_LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.urls == ["https://a.example.com/graph", "https://b.example.com/graph"]
    assert settings.poll_interval == 60.0
    assert settings.log_level == "DEBUG"


def test_dotenv_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("CRUISE_EXPORTER_NAMESPACE=cruise\n")

    assert Settings().namespace == "cruise"


@pytest.mark.parametrize(
    "overrides",
    [{"poll_interval": 0}, {"page_size": 0}, {"listen_port": 70000}, {"log_format": "xml"}, {"request_timeout": -1}],
)
def test_invalid_values(overrides) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_get_settings_ignores_none_overrides(monkeypatch) -> None:
    monkeypatch.setenv("CRUISE_EXPORTER_PAGE_SIZE", "50")

    settings = get_settings(page_size=None, namespace="cruise")

    assert settings.page_size == 50
    assert settings.namespace == "cruise"
