"""Tests for calendar and per-strategy breakdowns."""

from datetime import datetime

import pytest

from journal_analytics.journal.breakdown import (
    UNASSIGNED_STRATEGY,
    compute_breakdown,
    metrics_by_strategy,
)
from journal_analytics.journal.metrics import MetricsCalculator
from journal_analytics.journal.record import TradeRecord


@pytest.fixture
def records():
    return [
        TradeRecord(timestamp=datetime(2023, 12, 29, 9, 30), result=-20, strategy="breakout"),
        TradeRecord(timestamp=datetime(2024, 1, 2, 10, 0), result=100, strategy="breakout"),
        TradeRecord(timestamp=datetime(2024, 1, 2, 10, 45), result=-40, strategy="scalp"),
        TradeRecord(timestamp=datetime(2024, 1, 3, 14, 0), result=30),
        TradeRecord(timestamp=datetime(2024, 2, 1, 9, 15), result=-70, strategy="scalp"),
    ]


class TestCalendarSeries:
    def test_empty(self):
        breakdown = compute_breakdown([])
        assert breakdown.daily == []
        assert breakdown.monthly == []
        assert breakdown.hourly == []
        assert breakdown.best_days == []

    def test_daily(self, records):
        assert compute_breakdown(records).daily == [
            ("2023-12-29", -20),
            ("2024-01-02", 60),
            ("2024-01-03", 30),
            ("2024-02-01", -70),
        ]

    def test_monthly(self, records):
        assert compute_breakdown(records).monthly == [
            ("2023-12", -20),
            ("2024-01", 90),
            ("2024-02", -70),
        ]

    def test_yearly(self, records):
        assert compute_breakdown(records).yearly == [("2023", -20), ("2024", 20)]

    def test_hourly_only_active_hours(self, records):
        hourly = compute_breakdown(records).hourly
        assert [h.hour for h in hourly] == [9, 10, 14]
        ten = hourly[1]
        assert ten.count == 2
        assert ten.total == 60
        assert ten.mean == 30

    def test_ranked_days(self, records):
        breakdown = compute_breakdown(records)
        assert breakdown.best_days[0] == ("2024-01-02", 60)
        assert breakdown.worst_days[0] == ("2024-02-01", -70)
        assert len(breakdown.best_days) == 4

    def test_ranked_days_capped_at_five(self):
        records = [
            TradeRecord(timestamp=datetime(2024, 1, day, 10), result=day)
            for day in range(1, 11)
        ]
        breakdown = compute_breakdown(records)
        assert [v for _, v in breakdown.best_days] == [10, 9, 8, 7, 6]
        assert [v for _, v in breakdown.worst_days] == [1, 2, 3, 4, 5]

    def test_to_dict(self, records):
        data = compute_breakdown(records).to_dict()
        assert data["monthly"][0] == {"month": "2023-12", "result": -20}
        assert data["hourly"][0]["hour"] == 9


class TestPerStrategy:
    def test_grouped_and_sorted(self, records):
        result = metrics_by_strategy(records)
        assert list(result) == ["breakout", "scalp", UNASSIGNED_STRATEGY]
        assert result["breakout"].total_result == 80
        assert result["scalp"].total_result == -110
        assert result[UNASSIGNED_STRATEGY].total_operations == 1

    def test_uses_given_calculator(self, records):
        result = metrics_by_strategy(records, MetricsCalculator(periods_per_year=52))
        assert set(result) == {"breakout", "scalp", UNASSIGNED_STRATEGY}

    def test_empty(self):
        assert metrics_by_strategy([]) == {}
