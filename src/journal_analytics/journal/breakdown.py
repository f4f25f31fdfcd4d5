"""Calendar and strategy breakdowns of trade results.

Complements :mod:`.metrics` with the series the dashboards chart next
to the headline numbers: results per month, per year, per hour of day,
ranked best/worst days, and a full metrics set per strategy.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable

from .metrics import Metrics, MetricsCalculator, daily_totals, monthly_totals
from .record import TradeRecord

logger = logging.getLogger(__name__)

UNASSIGNED_STRATEGY = "unassigned"
RANKED_DAYS = 5


@dataclass(frozen=True)
class HourProfile:
    """Aggregate for one hour of day (0-23) across all weekdays."""

    hour: int
    total: float
    count: int
    mean: float

    def to_dict(self) -> dict[str, Any]:
        return {"hour": self.hour, "total": self.total, "count": self.count, "mean": self.mean}


@dataclass
class PerformanceBreakdown:
    """Period series keyed by ISO-style labels, ascending."""

    daily: list[tuple[str, float]] = field(default_factory=list)
    monthly: list[tuple[str, float]] = field(default_factory=list)
    yearly: list[tuple[str, float]] = field(default_factory=list)
    hourly: list[HourProfile] = field(default_factory=list)
    best_days: list[tuple[str, float]] = field(default_factory=list)
    worst_days: list[tuple[str, float]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "daily": [{"date": d, "result": v} for d, v in self.daily],
            "monthly": [{"month": m, "result": v} for m, v in self.monthly],
            "yearly": [{"year": y, "result": v} for y, v in self.yearly],
            "hourly": [h.to_dict() for h in self.hourly],
            "best_days": [{"date": d, "result": v} for d, v in self.best_days],
            "worst_days": [{"date": d, "result": v} for d, v in self.worst_days],
        }


def compute_breakdown(records: Iterable[TradeRecord]) -> PerformanceBreakdown:
    """Build the calendar breakdown for ``records``."""
    records = list(records)
    breakdown = PerformanceBreakdown()
    if not records:
        return breakdown

    breakdown.daily = [(d.isoformat(), v) for d, v in daily_totals(records).items()]
    breakdown.monthly = [
        (f"{year:04d}-{month:02d}", v) for (year, month), v in monthly_totals(records).items()
    ]

    by_year: dict[int, float] = defaultdict(float)
    by_hour: dict[int, list[float]] = defaultdict(list)
    for record in records:
        by_year[record.timestamp.year] += record.result
        by_hour[record.hour].append(record.result)

    breakdown.yearly = [(f"{year:04d}", v) for year, v in sorted(by_year.items())]
    breakdown.hourly = [
        HourProfile(hour=h, total=sum(vals), count=len(vals), mean=sum(vals) / len(vals))
        for h, vals in sorted(by_hour.items())
    ]

    # Stable: equal totals keep date order.
    ranked = sorted(breakdown.daily, key=lambda item: item[1], reverse=True)
    breakdown.best_days = ranked[:RANKED_DAYS]
    breakdown.worst_days = list(reversed(ranked[-RANKED_DAYS:]))

    logger.debug(
        "Breakdown: %d days, %d months, %d active hours",
        len(breakdown.daily), len(breakdown.monthly), len(breakdown.hourly),
    )
    return breakdown


def metrics_by_strategy(
    records: Iterable[TradeRecord],
    calculator: MetricsCalculator | None = None,
) -> dict[str, Metrics]:
    """Compute :class:`Metrics` separately for each strategy label.

    Records without a label are grouped under ``"unassigned"``.
    """
    calc = calculator or MetricsCalculator()
    grouped: dict[str, list[TradeRecord]] = defaultdict(list)
    for record in records:
        grouped[record.strategy or UNASSIGNED_STRATEGY].append(record)
    return {name: calc.compute(grouped[name]) for name in sorted(grouped)}
