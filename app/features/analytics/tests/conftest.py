"""Test fixtures for analytics module."""

from datetime import datetime, timezone

import pytest

from app.features.analytics.period import AnalyticsPeriod, Period, resolve_period


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache between tests."""
    from app.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant: mid-June 2024, UTC."""
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def period(now: datetime) -> Period:
    """Monthly window around the reference instant."""
    return resolve_period(AnalyticsPeriod.MONTHLY, now=now)
