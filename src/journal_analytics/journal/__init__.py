"""Trade journal analytics.

Pure computations over in-memory trade records: no I/O, no shared
state.  Same input, same output.

Key components
--------------
TradeRecord           Immutable closed-trade input record
MetricsCalculator     Totals, ratios, drawdown, streaks, equity curve
TimeBucketAggregator  Weekday × hour heatmap with period comparison
compute_breakdown     Daily/monthly/yearly/hourly result series
metrics_by_strategy   Metrics per strategy label
"""

from .record import TradeRecord, validate_records
from .metrics import EquityPoint, Metrics, MetricsCalculator, ProfitFactor
from .heatmap import (
    ComparisonCell,
    ComparisonSummary,
    HeatmapCell,
    TimeBucketAggregator,
    best_slot,
    summarize_comparison,
    worst_slot,
)
from .periods import PeriodWindow, comparison_windows, filter_lookback, filter_strategy
from .breakdown import PerformanceBreakdown, compute_breakdown, metrics_by_strategy

__all__ = [
    "TradeRecord",
    "validate_records",
    "EquityPoint",
    "Metrics",
    "MetricsCalculator",
    "ProfitFactor",
    "ComparisonCell",
    "ComparisonSummary",
    "HeatmapCell",
    "TimeBucketAggregator",
    "best_slot",
    "worst_slot",
    "summarize_comparison",
    "PeriodWindow",
    "comparison_windows",
    "filter_lookback",
    "filter_strategy",
    "PerformanceBreakdown",
    "compute_breakdown",
    "metrics_by_strategy",
]
