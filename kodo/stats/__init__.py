"""Time-bucketed commit statistics."""

from .aggregator import filter_non_zero, merge_stats, running_totals
from .collector import aggregate_by_month, aggregate_by_week, aggregate_by_year, collect_stats, effective_diff
from .types import AnalysisResult, DateRange, Period, PeriodBucket, TotalStats

__all__ = [
    "AnalysisResult",
    "DateRange",
    "Period",
    "PeriodBucket",
    "TotalStats",
    "aggregate_by_month",
    "aggregate_by_week",
    "aggregate_by_year",
    "collect_stats",
    "effective_diff",
    "filter_non_zero",
    "merge_stats",
    "running_totals",
]
