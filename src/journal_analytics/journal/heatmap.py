"""Weekday × hour performance heatmap.

Buckets trade results into a fixed grid of (weekday, hour) cells to
reveal temporal patterns ("Am I better on Tuesday mornings?").  The
grid is always complete: empty combinations come back as zero cells.

Comparison mode buckets two adjacent calendar windows (current vs.
previous week/month/quarter, or the two halves of the history) and
pairs the cells to show what changed.

Usage::

    aggregator = TimeBucketAggregator(hours=range(9, 18))
    cells = aggregator.bucket(records)
    best = best_slot(cells)

    diff = aggregator.compare_bucket(records, "month", reference=now)
    print(summarize_comparison(diff).total_change)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Sequence, TypeVar

from ..core.enums import TRADING_WEEKDAYS, PeriodKind, Weekday
from ..core.errors import ConfigError
from .periods import PeriodWindow, comparison_windows, parse_period_kind, split_in_half
from .record import TradeRecord

logger = logging.getLogger(__name__)

DEFAULT_HOURS = range(9, 18)  # 09h-17h inclusive


@dataclass(frozen=True)
class HeatmapCell:
    """Aggregate of the trades in one (weekday, hour) bucket."""

    weekday: Weekday
    hour: int
    operation_count: int
    total_result: float
    mean_result: float
    best_trade: float
    worst_trade: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekday": self.weekday.label,
            "hour": self.hour,
            "operation_count": self.operation_count,
            "total_result": self.total_result,
            "mean_result": self.mean_result,
            "best_trade": self.best_trade,
            "worst_trade": self.worst_trade,
        }


@dataclass(frozen=True)
class ComparisonCell(HeatmapCell):
    """Current-window cell paired with the same cell of the previous window."""

    previous_total_result: float
    previous_operation_count: int
    change: float
    change_percent: float

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            previous_total_result=self.previous_total_result,
            previous_operation_count=self.previous_operation_count,
            change=self.change,
            change_percent=self.change_percent,
        )
        return data


@dataclass(frozen=True)
class ComparisonSummary:
    """Headline numbers for a comparison grid."""

    improved: int
    declined: int
    total_change: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "improved": self.improved,
            "declined": self.declined,
            "total_change": self.total_change,
        }


class _CellStats:
    """Accumulator for one bucket."""

    __slots__ = ("count", "total", "best", "worst")

    def __init__(self) -> None:
        self.count = 0
        self.total = 0.0
        self.best = 0.0
        self.worst = 0.0

    def record(self, result: float) -> None:
        if self.count == 0:
            self.best = self.worst = result
        else:
            self.best = max(self.best, result)
            self.worst = min(self.worst, result)
        self.count += 1
        self.total += result

    def to_cell(self, weekday: Weekday, hour: int) -> HeatmapCell:
        return HeatmapCell(
            weekday=weekday,
            hour=hour,
            operation_count=self.count,
            total_result=self.total,
            mean_result=self.total / self.count if self.count else 0.0,
            best_trade=self.best,
            worst_trade=self.worst,
        )


def change_percent(current_total: float, previous_total: float) -> float:
    """Percent change against ``|previous|``.

    From a zero previous total the change is reported as 100 when the
    current total is non-zero and 0 otherwise; this is a product
    convention, not a derived percentage.
    """
    if previous_total != 0:
        return (current_total - previous_total) / abs(previous_total) * 100
    return 100.0 if current_total != 0 else 0.0


class TimeBucketAggregator:
    """Bucket trades into a weekday × hour grid.

    Parameters
    ----------
    hours : Iterable[int]
        Hours of day (0-23) forming the grid rows.  Default 9..17.
    weekdays : Iterable[Weekday | int]
        Weekdays forming the grid columns.  Default Monday..Friday.
    """

    def __init__(
        self,
        *,
        hours: Iterable[int] = DEFAULT_HOURS,
        weekdays: Iterable[Weekday | int] = TRADING_WEEKDAYS,
    ) -> None:
        self._hours = tuple(sorted(set(hours)))
        try:
            self._weekdays = tuple(sorted({Weekday(d) for d in weekdays}))
        except ValueError as exc:
            raise ConfigError(f"Invalid weekday: {exc}") from exc
        if not self._hours:
            raise ConfigError("Hour range must not be empty")
        if self._hours[0] < 0 or self._hours[-1] > 23:
            raise ConfigError(f"Hours must be within 0-23, got {self._hours}")
        if not self._weekdays:
            raise ConfigError("Weekday range must not be empty")

    @property
    def hours(self) -> tuple[int, ...]:
        return self._hours

    @property
    def weekdays(self) -> tuple[Weekday, ...]:
        return self._weekdays

    @property
    def grid_size(self) -> int:
        return len(self._hours) * len(self._weekdays)

    def in_range(self, record: TradeRecord) -> bool:
        return record.weekday in self._weekdays and record.hour in self._hours

    # ------------------------------------------------------------------ #
    # Single period                                                        #
    # ------------------------------------------------------------------ #

    def bucket(self, records: Iterable[TradeRecord]) -> list[HeatmapCell]:
        """Aggregate records into the full grid, weekday-major.

        Records on other weekdays or outside the hour range are
        dropped silently.
        """
        stats: dict[tuple[int, int], _CellStats] = {
            (day, hour): _CellStats() for day in self._weekdays for hour in self._hours
        }
        dropped = 0
        for record in records:
            cell = stats.get((record.weekday, record.hour))
            if cell is None:
                dropped += 1
                continue
            cell.record(record.result)

        if dropped:
            logger.debug("Heatmap dropped %d out-of-range records", dropped)

        return [
            stats[(day, hour)].to_cell(day, hour)
            for day in self._weekdays
            for hour in self._hours
        ]

    # ------------------------------------------------------------------ #
    # Comparison                                                           #
    # ------------------------------------------------------------------ #

    def comparison_windows(
        self,
        period_kind: PeriodKind | str,
        reference: datetime | date | None = None,
    ) -> tuple[PeriodWindow, PeriodWindow]:
        """``(previous, current)`` calendar windows used by ``compare_bucket``."""
        return comparison_windows(period_kind, reference or datetime.now())

    def compare_bucket(
        self,
        records: Iterable[TradeRecord],
        period_kind: PeriodKind | str,
        reference: datetime | date | None = None,
    ) -> list[ComparisonCell]:
        """Bucket the current and previous windows and pair their cells.

        ``reference`` defaults to the current wall-clock time, read once
        here.  ``PeriodKind.ALL`` compares the later half of the history
        (by date) against the earlier half.
        """
        kind = parse_period_kind(period_kind)
        records = list(records)

        if kind == PeriodKind.ALL:
            previous_records, current_records = split_in_half(records)
        else:
            previous, current = self.comparison_windows(kind, reference)
            previous_records = previous.select(records)
            current_records = current.select(records)
            logger.debug(
                "Comparing %s windows %s..%s vs %s..%s",
                kind.value, current.start, current.end, previous.start, previous.end,
            )

        return pair_cells(self.bucket(current_records), self.bucket(previous_records))


def pair_cells(
    current: Sequence[HeatmapCell],
    previous: Sequence[HeatmapCell],
) -> list[ComparisonCell]:
    """Pair two grids by (weekday, hour) into comparison cells."""
    by_key = {(c.weekday, c.hour): c for c in previous}
    paired: list[ComparisonCell] = []
    for cell in current:
        prev = by_key.get((cell.weekday, cell.hour))
        prev_total = prev.total_result if prev else 0.0
        prev_count = prev.operation_count if prev else 0
        paired.append(
            ComparisonCell(
                weekday=cell.weekday,
                hour=cell.hour,
                operation_count=cell.operation_count,
                total_result=cell.total_result,
                mean_result=cell.mean_result,
                best_trade=cell.best_trade,
                worst_trade=cell.worst_trade,
                previous_total_result=prev_total,
                previous_operation_count=prev_count,
                change=cell.total_result - prev_total,
                change_percent=change_percent(cell.total_result, prev_total),
            )
        )
    return paired


# ---------------------------------------------------------------------- #
# Slot selection                                                           #
# ---------------------------------------------------------------------- #

CellT = TypeVar("CellT", bound=HeatmapCell)


def best_slot(cells: Iterable[CellT]) -> CellT | None:
    """Cell with the highest total among cells with trades.

    Ties keep the first cell in grid (weekday-major) order.
    """
    best: CellT | None = None
    for cell in cells:
        if cell.operation_count <= 0:
            continue
        if best is None or cell.total_result > best.total_result:
            best = cell
    return best


def worst_slot(cells: Iterable[CellT]) -> CellT | None:
    """Cell with the lowest total among cells with trades, if negative."""
    worst: CellT | None = None
    for cell in cells:
        if cell.operation_count <= 0:
            continue
        if worst is None or cell.total_result < worst.total_result:
            worst = cell
    if worst is None or worst.total_result >= 0:
        return None
    return worst


def summarize_comparison(cells: Iterable[ComparisonCell]) -> ComparisonSummary:
    """Count improved/declined cells and sum the overall change.

    Only cells with trades in either window count as improved or
    declined.
    """
    improved = declined = 0
    total_change = 0.0
    for cell in cells:
        total_change += cell.change
        active = cell.operation_count > 0 or cell.previous_operation_count > 0
        if not active:
            continue
        if cell.change > 0:
            improved += 1
        elif cell.change < 0:
            declined += 1
    return ComparisonSummary(improved=improved, declined=declined, total_change=total_change)
