"""Shared fixtures for the journal-analytics test suite."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from journal_analytics.journal.record import TradeRecord


# 2024-01-01 was a Monday.
MONDAY = datetime(2024, 1, 1)


def at(weekday: int, hour: int, minute: int = 0, week: int = 0) -> datetime:
    """Timestamp on ``weekday`` (0=Monday) of the ``week``-th week of 2024."""
    return MONDAY + timedelta(days=weekday + 7 * week, hours=hour, minutes=minute)


@pytest.fixture
def monday() -> datetime:
    return MONDAY


@pytest.fixture(name="at")
def at_fixture():
    """The ``at(weekday, hour, minute=0, week=0)`` timestamp helper."""
    return at


@pytest.fixture
def make_record():
    """Factory for TradeRecord with sensible defaults."""

    def _make(
        result: float,
        timestamp: datetime | None = None,
        strategy: str | None = None,
    ) -> TradeRecord:
        return TradeRecord(timestamp=timestamp or at(0, 10), result=result, strategy=strategy)

    return _make


@pytest.fixture
def sequence():
    """Factory: one record per result, one hour apart, starting Monday 10:00."""

    def _make(results: list[float], start: datetime | None = None) -> list[TradeRecord]:
        base = start or at(0, 10)
        return [
            TradeRecord(timestamp=base + timedelta(hours=i), result=r)
            for i, r in enumerate(results)
        ]

    return _make
