"""Trade performance metrics.

Turns an unordered collection of :class:`TradeRecord` into the scalar
statistics and derived series the journal dashboards display: totals,
win rate, payoff, drawdown, Sharpe ratio, profit factor, expectancy,
recovery factor, streaks and the equity curve.

Every sequential statistic is computed over the records stably sorted
by timestamp, so ties keep their input order.

Usage::

    calc = MetricsCalculator()
    metrics = calc.compute(records)
    print(metrics.win_rate, metrics.max_drawdown, str(metrics.profit_factor))
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from functools import reduce
from typing import Any, Iterable

import numpy as np

from ..core.enums import StreakType
from .record import TradeRecord

logger = logging.getLogger(__name__)

TRADING_DAYS_PER_YEAR = 252
UNBOUNDED_SYMBOL = "∞"


@dataclass(frozen=True)
class ProfitFactor:
    """Gross profit / gross loss, or *unbounded* when nothing was lost.

    Kept as a tagged value rather than ``float("inf")`` so formatting
    and comparison code has to handle the unbounded case explicitly.
    """

    value: float | None
    is_unbounded: bool = False

    @classmethod
    def finite(cls, value: float) -> ProfitFactor:
        return cls(value=value, is_unbounded=False)

    @classmethod
    def unbounded(cls) -> ProfitFactor:
        return cls(value=None, is_unbounded=True)

    @classmethod
    def from_gross(cls, gross_profit: float, gross_loss: float) -> ProfitFactor:
        if gross_loss > 0:
            return cls.finite(gross_profit / gross_loss)
        if gross_profit > 0:
            return cls.unbounded()
        return cls.finite(0.0)

    def as_float(self) -> float:
        """Numeric view; ``math.inf`` for the unbounded case."""
        return math.inf if self.is_unbounded else float(self.value or 0.0)

    def to_json(self) -> float | str:
        return UNBOUNDED_SYMBOL if self.is_unbounded else float(self.value or 0.0)

    def __str__(self) -> str:
        return UNBOUNDED_SYMBOL if self.is_unbounded else f"{self.value:.2f}"


@dataclass(frozen=True)
class EquityPoint:
    """One point of the equity curve (one per record)."""

    sequence_index: int  # 1-based position in chronological order
    result: float
    cumulative_total: float
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence_index": self.sequence_index,
            "result": self.result,
            "cumulative_total": self.cumulative_total,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class Metrics:
    """Computed performance statistics for one record set."""

    # Totals
    total_result: float = 0.0
    total_operations: int = 0
    winning_trades: int = 0
    losing_trades: int = 0

    # Trade quality
    win_rate: float = 0.0  # Percent, 0-100
    avg_win: float = 0.0
    avg_loss: float = 0.0  # Absolute value
    payoff: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    profit_factor: ProfitFactor = field(default_factory=lambda: ProfitFactor.finite(0.0))
    expectancy: float = 0.0

    # Dispersion
    standard_deviation: float = 0.0
    volatility: float = 0.0  # Percent of |mean|
    sharpe_ratio: float = 0.0

    # Equity curve & drawdown
    equity_curve: list[EquityPoint] = field(default_factory=list)
    max_balance: float = 0.0
    min_balance: float = 0.0
    max_drawdown: float = 0.0
    max_drawdown_duration: int = 0  # In operations
    recovery_factor: float = 0.0

    # Streak
    current_streak: int = 0
    streak_type: StreakType | None = None

    # Calendar consistency
    total_days: int = 0
    positive_days: int = 0
    negative_days: int = 0
    positive_months: int = 0
    negative_months: int = 0
    monthly_average: float = 0.0
    consistency: float = 0.0  # Percent of days that were positive

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_result": self.total_result,
            "total_operations": self.total_operations,
            "winning_trades": self.winning_trades,
            "losing_trades": self.losing_trades,
            "win_rate": self.win_rate,
            "avg_win": self.avg_win,
            "avg_loss": self.avg_loss,
            "payoff": self.payoff,
            "best_trade": self.best_trade,
            "worst_trade": self.worst_trade,
            "profit_factor": self.profit_factor.to_json(),
            "expectancy": self.expectancy,
            "standard_deviation": self.standard_deviation,
            "volatility": self.volatility,
            "sharpe_ratio": self.sharpe_ratio,
            "equity_curve": [p.to_dict() for p in self.equity_curve],
            "max_balance": self.max_balance,
            "min_balance": self.min_balance,
            "max_drawdown": self.max_drawdown,
            "max_drawdown_duration": self.max_drawdown_duration,
            "recovery_factor": self.recovery_factor,
            "current_streak": self.current_streak,
            "streak_type": self.streak_type.value if self.streak_type else None,
            "total_days": self.total_days,
            "positive_days": self.positive_days,
            "negative_days": self.negative_days,
            "positive_months": self.positive_months,
            "negative_months": self.negative_months,
            "monthly_average": self.monthly_average,
            "consistency": self.consistency,
        }


@dataclass(frozen=True)
class _DrawdownState:
    """Accumulator for the drawdown fold over the equity curve."""

    peak: float = 0.0
    max_drawdown: float = 0.0
    current_run: int = 0
    max_run: int = 0


def _advance_drawdown(state: _DrawdownState, cumulative: float) -> _DrawdownState:
    # A strictly higher total is a new peak and closes the run.
    if cumulative > state.peak:
        return _DrawdownState(
            peak=cumulative,
            max_drawdown=state.max_drawdown,
            current_run=0,
            max_run=state.max_run,
        )
    run = state.current_run + 1
    return _DrawdownState(
        peak=state.peak,
        max_drawdown=max(state.max_drawdown, state.peak - cumulative),
        current_run=run,
        max_run=max(state.max_run, run),
    )


def sort_chronologically(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Stable ascending sort by wall-clock timestamp.

    Naive and aware timestamps may be mixed; offsets are ignored.
    """
    return sorted(records, key=lambda r: r.wall_clock)


def build_equity_curve(ordered: list[TradeRecord]) -> list[EquityPoint]:
    """Annotate chronologically ordered records with a running total."""
    curve: list[EquityPoint] = []
    cumulative = 0.0
    for idx, record in enumerate(ordered, start=1):
        cumulative += record.result
        curve.append(
            EquityPoint(
                sequence_index=idx,
                result=record.result,
                cumulative_total=cumulative,
                timestamp=record.timestamp,
            )
        )
    return curve


def current_streak(ordered: list[TradeRecord]) -> tuple[int, StreakType | None]:
    """Length and kind of the run ending at the most recent trade.

    A zero result breaks any streak; a zero as the latest trade means
    there is no current streak.
    """
    count = 0
    kind: StreakType | None = None
    for record in reversed(ordered):
        sign = _streak_kind(record.result)
        if sign is None:
            break
        if kind is None:
            kind = sign
        elif sign != kind:
            break
        count += 1
    return count, kind


def _streak_kind(result: float) -> StreakType | None:
    if result > 0:
        return StreakType.WIN
    if result < 0:
        return StreakType.LOSS
    return None


def daily_totals(records: Iterable[TradeRecord]) -> dict[date, float]:
    """Summed result per calendar day, keys in ascending order."""
    totals: dict[date, float] = defaultdict(float)
    for record in records:
        totals[record.trade_date] += record.result
    return dict(sorted(totals.items()))


def monthly_totals(records: Iterable[TradeRecord]) -> dict[tuple[int, int], float]:
    """Summed result per (year, month), keys in ascending order."""
    totals: dict[tuple[int, int], float] = defaultdict(float)
    for record in records:
        totals[(record.timestamp.year, record.timestamp.month)] += record.result
    return dict(sorted(totals.items()))


def _population_std(values: np.ndarray) -> float:
    if values.size == 0:
        return 0.0
    return float(np.std(values, ddof=0))


class MetricsCalculator:
    """Compute journal performance metrics.

    Stateless: ``compute`` may be called concurrently with different
    inputs.

    Parameters
    ----------
    periods_per_year : int
        Annualisation factor for the Sharpe ratio.  Default 252.
    """

    def __init__(self, *, periods_per_year: int = TRADING_DAYS_PER_YEAR) -> None:
        self._periods_per_year = periods_per_year

    @property
    def periods_per_year(self) -> int:
        return self._periods_per_year

    def compute(self, records: Iterable[TradeRecord]) -> Metrics:
        """Compute every metric for ``records``.

        Empty input yields a zero-valued :class:`Metrics`; nothing here
        raises for well-typed records.
        """
        ordered = sort_chronologically(records)
        metrics = Metrics()
        if not ordered:
            logger.debug("No records supplied; returning zero metrics")
            return metrics

        results = np.array([r.result for r in ordered], dtype=float)
        n = len(ordered)

        wins = results[results > 0]
        losses = results[results < 0]

        gross_profit = float(np.sum(wins)) if wins.size else 0.0
        gross_loss = abs(float(np.sum(losses))) if losses.size else 0.0

        # Total is the final running sum of the curve.
        metrics.equity_curve = build_equity_curve(ordered)
        metrics.total_result = metrics.equity_curve[-1].cumulative_total
        metrics.total_operations = n
        metrics.winning_trades = int(wins.size)
        metrics.losing_trades = int(losses.size)
        metrics.win_rate = wins.size / n * 100
        metrics.avg_win = gross_profit / wins.size if wins.size else 0.0
        metrics.avg_loss = gross_loss / losses.size if losses.size else 0.0
        metrics.payoff = metrics.avg_win / metrics.avg_loss if metrics.avg_loss > 0 else 0.0
        metrics.best_trade = float(np.max(results))
        metrics.worst_trade = float(np.min(results))
        metrics.profit_factor = ProfitFactor.from_gross(gross_profit, gross_loss)

        win_fraction = metrics.win_rate / 100
        metrics.expectancy = win_fraction * metrics.avg_win - (1 - win_fraction) * metrics.avg_loss

        mean = metrics.total_result / n
        metrics.standard_deviation = _population_std(results)
        metrics.volatility = metrics.standard_deviation / abs(mean) * 100 if mean != 0 else 0.0

        # Drawdown
        totals = [p.cumulative_total for p in metrics.equity_curve]
        metrics.max_balance = max(0.0, max(totals))
        metrics.min_balance = min(0.0, min(totals))

        drawdown = reduce(_advance_drawdown, totals, _DrawdownState())
        metrics.max_drawdown = drawdown.max_drawdown
        metrics.max_drawdown_duration = drawdown.max_run
        metrics.recovery_factor = (
            metrics.total_result / metrics.max_drawdown if metrics.max_drawdown > 0 else 0.0
        )

        metrics.current_streak, metrics.streak_type = current_streak(ordered)

        # Calendar aggregation
        days = daily_totals(ordered)
        months = monthly_totals(ordered)
        day_values = np.array(list(days.values()), dtype=float)

        metrics.total_days = len(days)
        metrics.positive_days = int(np.sum(day_values > 0))
        metrics.negative_days = int(np.sum(day_values < 0))
        metrics.positive_months = sum(1 for v in months.values() if v > 0)
        metrics.negative_months = sum(1 for v in months.values() if v < 0)
        metrics.monthly_average = sum(months.values()) / len(months)
        metrics.consistency = metrics.positive_days / metrics.total_days * 100
        metrics.sharpe_ratio = self._sharpe(day_values)

        logger.debug(
            "Computed metrics: records=%d days=%d total=%.2f",
            n, metrics.total_days, metrics.total_result,
        )
        return metrics

    def _sharpe(self, daily_returns: np.ndarray) -> float:
        """Annualised mean/std of daily results (population std)."""
        if daily_returns.size < 1:
            return 0.0
        std = _population_std(daily_returns)
        if std == 0:
            return 0.0
        return float(np.mean(daily_returns)) / std * math.sqrt(self._periods_per_year)
