"""Helpers that operate on sequences of period buckets."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

from .types import PeriodBucket


def merge_stats(stats: Iterable[PeriodBucket]) -> PeriodBucket:
    """Merge buckets into one.

    The result keeps the first bucket's date and label. An empty input
    yields an all-zero bucket dated at ``date.min``.
    """

    result: PeriodBucket | None = None
    for stat in stats:
        if result is None:
            result = stat.copy()
        else:
            result.merge(stat)

    if result is None:
        return PeriodBucket(date=date.min)
    return result


def filter_non_zero(stats: Iterable[PeriodBucket]) -> List[PeriodBucket]:
    """Drop buckets without commits or changed lines."""

    return [stat for stat in stats if stat.commits > 0 or stat.additions > 0 or stat.deletions > 0]


def running_totals(stats: Iterable[PeriodBucket]) -> List[PeriodBucket]:
    """Cumulative counters, one entry per input bucket."""

    result: List[PeriodBucket] = []
    running: PeriodBucket | None = None

    for stat in stats:
        if running is None:
            running = PeriodBucket(date=stat.date)
        running.merge(stat)
        period = running.copy()
        period.date = stat.date
        period.label = stat.label
        result.append(period)

    return result
