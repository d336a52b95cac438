"""Analytics period resolution.

Every analytics request is scoped to a closed window ``[start_date, end_date]``
resolved from a period token relative to "now".
"""

import calendar
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


class AnalyticsPeriod(str, Enum):
    """Supported analytics period tokens."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Period:
    """Resolved analytics window.

    Attributes:
        start_date: Inclusive window start (timezone-aware).
        end_date: Inclusive window end (timezone-aware).
        token: Period token the window was resolved as.
    """

    start_date: datetime
    end_date: datetime
    token: AnalyticsPeriod

    @property
    def length_days(self) -> int:
        """Window length in whole days, rounded up."""
        return math.ceil((self.end_date - self.start_date) / timedelta(days=1))

    def previous(self) -> "Period":
        """Window of the same length immediately preceding this one.

        The previous window ends one day before this window starts.
        """
        previous_end = self.start_date - timedelta(days=1)
        previous_start = previous_end - timedelta(days=self.length_days)
        return Period(start_date=previous_start, end_date=previous_end, token=self.token)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def shift_months(value: datetime, months: int) -> datetime:
    """Shift a datetime by calendar months, clamping the day to the month end.

    Example:
        >>> shift_months(datetime(2024, 5, 31), -3)
        datetime.datetime(2024, 2, 29, 0, 0)
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def start_of_month(value: datetime) -> datetime:
    """First instant of the month containing ``value``."""
    return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def end_of_month(value: datetime) -> datetime:
    """Last instant of the month containing ``value``."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return value.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999999)


def ensure_aware(value: datetime) -> datetime:
    # Naive datetimes from query strings are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_period(
    token: str | AnalyticsPeriod = AnalyticsPeriod.MONTHLY,
    custom_start: datetime | None = None,
    custom_end: datetime | None = None,
    now: datetime | None = None,
) -> Period:
    """Resolve a period token into a concrete window.

    Unrecognised tokens, and ``custom`` without a start, fall back to the
    current calendar month. Resolution never fails.

    Args:
        token: Period token (weekly, monthly, quarterly, yearly, custom).
        custom_start: Window start for ``custom``.
        custom_end: Window end for ``custom`` (defaults to now).
        now: Reference instant (defaults to current UTC time).

    Returns:
        Resolved period.
    """
    now = ensure_aware(now) if now is not None else utc_now()
    value = token.value if isinstance(token, AnalyticsPeriod) else str(token)

    if value == AnalyticsPeriod.CUSTOM.value and custom_start is not None:
        return Period(
            start_date=ensure_aware(custom_start),
            end_date=ensure_aware(custom_end) if custom_end is not None else now,
            token=AnalyticsPeriod.CUSTOM,
        )

    if value == AnalyticsPeriod.WEEKLY.value:
        return Period(now - timedelta(days=7), now, AnalyticsPeriod.WEEKLY)
    if value == AnalyticsPeriod.QUARTERLY.value:
        return Period(shift_months(now, -3), now, AnalyticsPeriod.QUARTERLY)
    if value == AnalyticsPeriod.YEARLY.value:
        return Period(shift_months(now, -12), now, AnalyticsPeriod.YEARLY)

    return Period(start_of_month(now), end_of_month(now), AnalyticsPeriod.MONTHLY)
