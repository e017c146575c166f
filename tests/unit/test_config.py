"""Unit tests for environment-driven settings."""

from pydantic import ValidationError
import pytest

from resource_search.config import Settings, get_settings


pytestmark = pytest.mark.unit


def test_defaults_from_test_environment():
    settings = Settings()

    assert settings.history_size == 20
    assert settings.suggestion_min_length == 2
    assert settings.max_suggestions == 10
    assert settings.inline_suggestions == 3
    assert settings.log_json is False
    assert settings.tracing_enabled is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RESOURCE_SEARCH_HISTORY_SIZE", "50")
    monkeypatch.setenv("RESOURCE_SEARCH_LOG_JSON", "true")
    monkeypatch.setenv("RESOURCE_SEARCH_SERVICE_NAME", "inventory-tui")

    settings = Settings()

    assert settings.history_size == 50
    assert settings.log_json is True
    assert settings.service_name == "inventory-tui"


def test_log_level_normalized(monkeypatch):
    monkeypatch.setenv("RESOURCE_SEARCH_LOG_LEVEL", "debug")
    assert Settings().get_log_level() == "DEBUG"


@pytest.mark.parametrize(
    "overrides",
    [
        {"history_size": 0},
        {"suggestion_min_length": 0},
        {"max_suggestions": 2, "inline_suggestions": 3},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("RESOURCE_SEARCH_HISTORY_SIZE", "99")

    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().history_size == 99
