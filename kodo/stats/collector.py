"""Statistics collection from commit records."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from ..models import CommitRecord
from .types import AnalysisResult, DateRange, Period, PeriodBucket

logger = logging.getLogger(__name__)


def effective_diff(commit: CommitRecord, extensions: Optional[Sequence[str]] = None) -> Tuple[int, int, int]:
    """Return (additions, deletions, files_changed) counted for ``commit``.

    With an extension allow-list only matching files contribute; otherwise
    the commit's own totals are used.
    """

    if extensions is None:
        return commit.diff.additions, commit.diff.deletions, commit.diff.files_changed

    matching = [change for change in commit.diff.files if change.matches_extensions(extensions)]
    return (
        sum(change.additions for change in matching),
        sum(change.deletions for change in matching),
        len(matching),
    )


def collect_stats(
    repo_name: str,
    commits: Iterable[CommitRecord],
    range_: DateRange,
    period: Period,
    extensions: Optional[Sequence[str]] = None,
) -> AnalysisResult:
    """Group commits into period buckets over ``range_``.

    Every day of the range gets a bucket, zero-filled when nothing was
    committed, before the daily buckets are rolled up to ``period``.

    Merge commits must already have been dropped by the caller; the merge
    flag is not consulted here and any merge commit passed in is counted.
    """

    daily: Dict[date, PeriodBucket] = {}
    seen = 0

    for commit in commits:
        day = commit.date
        additions, deletions, files_changed = effective_diff(commit, extensions)
        bucket = daily.get(day)
        if bucket is None:
            bucket = daily[day] = PeriodBucket.for_day(day)
        bucket.add_commit(additions, deletions, files_changed)
        seen += 1

    for day in range_.iter_days():
        if day not in daily:
            daily[day] = PeriodBucket.for_day(day)

    stats = sorted(daily.values(), key=lambda bucket: bucket.date)
    logger.debug("Bucketed %d commits into %d days for %s", seen, len(stats), repo_name)

    if period is Period.WEEKLY:
        stats = aggregate_by_week(stats)
    elif period is Period.MONTHLY:
        stats = aggregate_by_month(stats)
    elif period is Period.YEARLY:
        stats = aggregate_by_year(stats)

    return AnalysisResult.build(repo_name, period, range_, stats)


def _roll_up(
    daily_stats: Iterable[PeriodBucket],
    key_for: Callable[[date], Hashable],
    label_for: Callable[[date], str],
) -> List[PeriodBucket]:
    groups: Dict[Hashable, PeriodBucket] = {}

    for stat in daily_stats:
        key = key_for(stat.date)
        group = groups.get(key)
        if group is None:
            group = groups[key] = PeriodBucket(date=stat.date, label=label_for(stat.date))
        elif stat.date < group.date:
            group.date = stat.date
        group.merge(stat)

    return sorted(groups.values(), key=lambda bucket: bucket.date)


def _iso_week_key(day: date) -> Tuple[int, int]:
    iso = day.isocalendar()
    return iso[0], iso[1]


def aggregate_by_week(daily_stats: Iterable[PeriodBucket]) -> List[PeriodBucket]:
    """Roll daily buckets up into ISO weeks labelled ``YYYY-Www``."""

    return _roll_up(
        daily_stats,
        _iso_week_key,
        lambda day: "{0}-W{1:02d}".format(*_iso_week_key(day)),
    )


def aggregate_by_month(daily_stats: Iterable[PeriodBucket]) -> List[PeriodBucket]:
    """Roll daily buckets up into calendar months labelled ``YYYY-MM``."""

    return _roll_up(
        daily_stats,
        lambda day: (day.year, day.month),
        lambda day: f"{day.year:04d}-{day.month:02d}",
    )


def aggregate_by_year(daily_stats: Iterable[PeriodBucket]) -> List[PeriodBucket]:
    """Roll daily buckets up into calendar years labelled ``YYYY``."""

    return _roll_up(
        daily_stats,
        lambda day: day.year,
        lambda day: f"{day.year:04d}",
    )
