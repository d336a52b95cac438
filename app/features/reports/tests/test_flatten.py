"""Tests for metric flattening."""

from datetime import date, datetime, timezone
from decimal import Decimal

from app.features.analytics.schemas import CallStats, DateRange, LoyaltyMonth
from app.features.reports.flatten import flatten_metrics, format_value
from app.features.reports.schemas import ReportRow


def as_dict(rows: list[ReportRow]) -> dict[str, str]:
    return {row.metric: row.value for row in rows}


class TestFormatValue:
    """Tests for leaf value formatting."""

    def test_none_is_empty(self):
        assert format_value(None) == ""

    def test_booleans_are_lowercase(self):
        assert format_value(True) == "true"
        assert format_value(False) == "false"

    def test_dates_are_iso(self):
        assert format_value(date(2024, 6, 1)) == "2024-06-01"
        assert (
            format_value(datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc))
            == "2024-06-01T08:30:00+00:00"
        )

    def test_lists_are_json(self):
        assert format_value([1, 2]) == "[1,2]"
        assert format_value(("a",)) == '["a"]'

    def test_scalars_use_str(self):
        assert format_value(3) == "3"
        assert format_value(Decimal("12.50")) == "12.50"
        assert format_value("60.00") == "60.00"


class TestFlattenMetrics:
    """Tests for flatten_metrics."""

    def test_nested_keys_joined_with_underscore(self):
        rows = flatten_metrics({"calls": {"total": 3, "answered": 2}, "period": "weekly"})

        assert [row.metric for row in rows] == ["calls_total", "calls_answered", "period"]
        assert as_dict(rows)["calls_total"] == "3"

    def test_models_are_dumped_first(self):
        rows = flatten_metrics(CallStats(total=4, answered=3, missed=1, answer_rate=75.0))

        assert as_dict(rows) == {
            "total": "4",
            "answered": "3",
            "missed": "1",
            "answer_rate": "75.0",
        }

    def test_nested_model_and_dates(self):
        date_range = DateRange(
            start_date=datetime(2024, 6, 1, tzinfo=timezone.utc),
            end_date=datetime(2024, 6, 30, tzinfo=timezone.utc),
        )

        rows = flatten_metrics({"date_range": date_range})

        assert as_dict(rows)["date_range_start_date"] == "2024-06-01T00:00:00+00:00"

    def test_lists_of_models_are_json(self):
        rows = flatten_metrics(
            {"monthly_stats": [LoyaltyMonth(month="Jan", points_earned=5, points_redeemed=0)]}
        )

        assert as_dict(rows)["monthly_stats"] == (
            '[{"month":"Jan","points_earned":5,"points_redeemed":0}]'
        )

    def test_prefix(self):
        rows = flatten_metrics({"total": 1}, prefix="staff")

        assert rows == [ReportRow(metric="staff_total", value="1")]

    def test_empty_mapping_gives_no_rows(self):
        assert flatten_metrics({}) == []
        assert flatten_metrics({"by_type": {}}) == []

    def test_idempotent_on_flat_input(self):
        flat = {"total": 3, "rate": "60.00", "active": True, "note": None}

        once = flatten_metrics(flat)
        twice = flatten_metrics(as_dict(once))

        assert twice == once
