"""Golden test: deterministic analytics output.

Verifies that computing metrics and heatmaps twice, from independent
copies of the same records, produces byte-identical serialized output.
Guards against non-determinism creeping in (set/dict ordering, float
summation order, wall-clock reads).
"""

import hashlib
import json
import random
from datetime import datetime, timedelta

from journal_analytics.journal.breakdown import compute_breakdown
from journal_analytics.journal.heatmap import TimeBucketAggregator
from journal_analytics.journal.metrics import MetricsCalculator
from journal_analytics.journal.record import TradeRecord


def _records(seed: int = 7, n: int = 500) -> list[TradeRecord]:
    rng = random.Random(seed)
    base = datetime(2024, 1, 1, 9, 0)
    return [
        TradeRecord(
            timestamp=base + timedelta(minutes=rng.randrange(0, 60 * 24 * 180)),
            result=round(rng.gauss(5, 120), 2),
            strategy=rng.choice(["breakout", "scalp", None]),
        )
        for _ in range(n)
    ]


def _digest(payload) -> str:
    return hashlib.sha256(json.dumps(payload, sort_keys=True).encode()).hexdigest()


class TestDeterministicAnalytics:
    """Same inputs -> same output hash."""

    def test_metrics_hash_stable(self):
        first = MetricsCalculator().compute(_records()).to_dict()
        second = MetricsCalculator().compute(_records()).to_dict()
        assert _digest(first) == _digest(second)

    def test_heatmap_hash_stable(self):
        agg = TimeBucketAggregator()
        first = [c.to_dict() for c in agg.bucket(_records())]
        second = [c.to_dict() for c in agg.bucket(_records())]
        assert _digest(first) == _digest(second)

    def test_comparison_hash_stable(self):
        agg = TimeBucketAggregator()
        reference = datetime(2024, 6, 15)
        first = [c.to_dict() for c in agg.compare_bucket(_records(), "quarter", reference)]
        second = [c.to_dict() for c in agg.compare_bucket(_records(), "quarter", reference)]
        assert _digest(first) == _digest(second)

    def test_breakdown_hash_stable(self):
        assert _digest(compute_breakdown(_records()).to_dict()) == _digest(
            compute_breakdown(_records()).to_dict()
        )
