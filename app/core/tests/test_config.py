"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_settings


def test_settings_has_defaults():
    settings = Settings()

    assert settings.app_name == "RepairDesk"
    assert settings.app_env == "development"
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.api_port == 8123
    assert settings.database_url.startswith("postgresql+asyncpg://")


@pytest.mark.parametrize(
    ("env", "expected"),
    [("development", True), ("testing", False), ("staging", False), ("production", False)],
)
def test_is_development(env, expected):
    assert Settings(app_env=env).is_development is expected


def test_get_settings_returns_singleton():
    """get_settings should return cached singleton."""
    assert get_settings() is get_settings()


def test_settings_from_environment(monkeypatch):
    """Settings should load from environment variables."""
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ANALYTICS_STOCK_LIST_LIMIT", "50")

    settings = Settings()

    assert settings.app_name == "TestApp"
    assert settings.debug is True
    assert settings.log_level == "DEBUG"
    assert settings.analytics_stock_list_limit == 50


def test_settings_analytics_defaults():
    """Analytics thresholds and list limits should default to 5 and 20."""
    settings = Settings()

    assert settings.analytics_low_stock_threshold == 5
    assert settings.analytics_location_low_stock_threshold == 5
    assert settings.analytics_top_performers_limit == 5
    assert settings.analytics_top_suppliers_limit == 5
    assert settings.analytics_latest_announcements_limit == 5
    assert settings.analytics_stock_list_limit == 20


def test_zero_threshold_is_allowed():
    assert Settings(analytics_low_stock_threshold=0).analytics_low_stock_threshold == 0


def test_settings_rejects_negative_threshold():
    with pytest.raises(ValidationError, match="Stock threshold must be >= 0"):
        Settings(analytics_low_stock_threshold=-1)


def test_settings_rejects_zero_limit():
    with pytest.raises(ValidationError, match="Limit must be >= 1"):
        Settings(analytics_stock_list_limit=0)


def test_settings_rejects_sync_driver():
    with pytest.raises(ValidationError, match="asyncpg"):
        Settings(database_url="postgresql://user:pw@localhost/shop")
