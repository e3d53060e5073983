"""Statistics models and aggregation."""

from chartdiff.stats.aggregator import aggregate
from chartdiff.stats.models import (
    BreakingChange,
    CategoryStats,
    CriticalChange,
    Impact,
    KindStats,
    LineStats,
    Statistics,
    Summary,
)

__all__ = [
    "BreakingChange",
    "CategoryStats",
    "CriticalChange",
    "Impact",
    "KindStats",
    "LineStats",
    "Statistics",
    "Summary",
    "aggregate",
]
