"""Shared fixtures for journal tests."""

import pytest

from journal_analytics.journal.heatmap import TimeBucketAggregator
from journal_analytics.journal.metrics import MetricsCalculator


@pytest.fixture
def calculator():
    return MetricsCalculator()


@pytest.fixture
def aggregator():
    return TimeBucketAggregator()
