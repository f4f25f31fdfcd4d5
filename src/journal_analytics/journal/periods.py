"""Calendar windows for period comparison and lookback filters.

All arithmetic works on calendar dates taken from each timestamp's own
wall-clock fields; no timezone conversion happens here.  Window bounds
are inclusive on both ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from ..core.enums import Lookback, PeriodKind
from ..core.errors import ConfigError
from .record import TradeRecord

_LOOKBACK_DAYS = {
    Lookback.DAYS_7: 7,
    Lookback.DAYS_30: 30,
    Lookback.DAYS_90: 90,
}


@dataclass(frozen=True)
class PeriodWindow:
    """Inclusive calendar-date range."""

    start: date
    end: date

    def contains(self, moment: datetime | date) -> bool:
        day = moment.date() if isinstance(moment, datetime) else moment
        return self.start <= day <= self.end

    def select(self, records: Iterable[TradeRecord]) -> list[TradeRecord]:
        return [r for r in records if self.contains(r.timestamp)]

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def parse_period_kind(value: PeriodKind | str) -> PeriodKind:
    try:
        return PeriodKind(value)
    except ValueError:
        raise ConfigError(f"Unknown comparison period: {value!r}") from None


def parse_lookback(value: Lookback | str) -> Lookback:
    try:
        return Lookback(value)
    except ValueError:
        raise ConfigError(f"Unknown lookback: {value!r}") from None


def _month_start(year: int, month: int) -> date:
    # Normalise month overflow/underflow into the year.
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return date(year, month, 1)


def comparison_windows(
    kind: PeriodKind | str,
    reference: datetime | date,
) -> tuple[PeriodWindow, PeriodWindow]:
    """Return ``(previous, current)`` windows for a calendar period.

    ``current`` runs from the start of the period containing
    ``reference`` up to and including the reference date; ``previous``
    is the whole period before it.  The two are disjoint and adjacent.

    Raises
    ------
    ConfigError
        For ``PeriodKind.ALL`` (no calendar window) or unknown kinds.
    """
    kind = parse_period_kind(kind)
    today = reference.date() if isinstance(reference, datetime) else reference

    if kind == PeriodKind.WEEK:
        current_start = today - timedelta(days=today.weekday())
        previous_start = current_start - timedelta(days=7)
    elif kind == PeriodKind.MONTH:
        current_start = date(today.year, today.month, 1)
        previous_start = _month_start(today.year, today.month - 1)
    elif kind == PeriodKind.QUARTER:
        first_month = (today.month - 1) // 3 * 3 + 1
        current_start = date(today.year, first_month, 1)
        previous_start = _month_start(today.year, first_month - 3)
    else:
        raise ConfigError(f"Period {kind.value!r} has no calendar window")

    previous = PeriodWindow(start=previous_start, end=current_start - timedelta(days=1))
    current = PeriodWindow(start=current_start, end=today)
    return previous, current


def split_in_half(records: Iterable[TradeRecord]) -> tuple[list[TradeRecord], list[TradeRecord]]:
    """Split records by calendar date into ``(earlier, later)`` halves.

    Stable sort on the date; the later half gets the extra record when
    the count is odd.
    """
    ordered = sorted(records, key=lambda r: r.trade_date)
    midpoint = len(ordered) // 2
    return ordered[:midpoint], ordered[midpoint:]


def filter_lookback(
    records: Iterable[TradeRecord],
    lookback: Lookback | str,
    reference: datetime,
) -> list[TradeRecord]:
    """Keep records inside a dashboard lookback ending at ``reference``.

    ``7d``/``30d``/``90d`` keep instants at or after ``reference``
    minus N days; ``ytd`` keeps everything from January 1 of the
    reference year; ``all`` keeps everything.  Cutoffs compare
    wall-clock values, so aware and naive timestamps mix freely.
    """
    lookback = parse_lookback(lookback)
    if lookback == Lookback.ALL:
        return list(records)
    if lookback == Lookback.YTD:
        start = datetime(reference.year, 1, 1)
    else:
        start = reference.replace(tzinfo=None) - timedelta(days=_LOOKBACK_DAYS[lookback])
    return [r for r in records if r.wall_clock >= start]


def filter_strategy(records: Iterable[TradeRecord], strategy: str | None) -> list[TradeRecord]:
    """Keep records for one strategy label; ``None`` or ``"all"`` keeps all."""
    if strategy is None or strategy == "all":
        return list(records)
    return [r for r in records if r.strategy == strategy]
