"""Value types for time-bucketed commit statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Iterator, List, Optional

from ..exceptions import InvalidDateRangeError


class Period(str, Enum):
    """Granularity of the buckets in an analysis result."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class PeriodBucket:
    """Accumulated statistics for one period.

    ``net_lines`` is derived from ``additions`` and ``deletions`` and is
    recomputed by every method that touches the counters.
    """

    date: date
    label: str = ""
    commits: int = 0
    additions: int = 0
    deletions: int = 0
    files_changed: int = 0
    net_lines: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.update_net_lines()

    @classmethod
    def for_day(cls, day: date) -> "PeriodBucket":
        return cls(date=day, label=day.isoformat())

    def add_commit(self, additions: int, deletions: int, files_changed: int) -> None:
        """Count one commit with the given diff totals."""

        self.commits += 1
        self.additions += additions
        self.deletions += deletions
        self.files_changed += files_changed
        self.update_net_lines()

    def merge(self, other: "PeriodBucket") -> None:
        """Fold ``other``'s counters into this bucket in place."""

        self.commits += other.commits
        self.additions += other.additions
        self.deletions += other.deletions
        self.files_changed += other.files_changed
        self.update_net_lines()

    def update_net_lines(self) -> None:
        self.net_lines = self.additions - self.deletions

    def copy(self) -> "PeriodBucket":
        return PeriodBucket(
            date=self.date,
            label=self.label,
            commits=self.commits,
            additions=self.additions,
            deletions=self.deletions,
            files_changed=self.files_changed,
        )

    def to_dict(self) -> Dict[str, object]:
        """Serialise the bucket as an export row."""

        return {
            "label": self.label,
            "date": self.date.isoformat(),
            "commits": self.commits,
            "additions": self.additions,
            "deletions": self.deletions,
            "net_lines": self.net_lines,
            "files_changed": self.files_changed,
        }


@dataclass(slots=True)
class TotalStats:
    """Grand totals across every bucket of a result."""

    commits: int = 0
    additions: int = 0
    deletions: int = 0
    net_lines: int = 0
    files_changed: int = 0

    @classmethod
    def from_buckets(cls, buckets: List[PeriodBucket]) -> "TotalStats":
        total = cls()
        for bucket in buckets:
            total.commits += bucket.commits
            total.additions += bucket.additions
            total.deletions += bucket.deletions
            total.files_changed += bucket.files_changed
        total.net_lines = total.additions - total.deletions
        return total

    def to_dict(self) -> Dict[str, int]:
        return {
            "commits": self.commits,
            "additions": self.additions,
            "deletions": self.deletions,
            "net_lines": self.net_lines,
            "files_changed": self.files_changed,
        }


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive span of calendar days."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidDateRangeError(
                f"Start date {self.start.isoformat()} is after end date {self.end.isoformat()}"
            )

    @classmethod
    def last_n_days(cls, days: int, today: Optional[date] = None) -> "DateRange":
        """Range of ``days`` calendar days ending today (UTC)."""

        if days < 1:
            raise InvalidDateRangeError(f"days must be at least 1, got {days}")
        end = today or datetime.now(timezone.utc).date()
        return cls(start=end - timedelta(days=days - 1), end=end)

    def iter_days(self) -> Iterator[date]:
        """Yield each day from start to end, ascending."""

        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __iter__(self) -> Iterator[date]:
        return self.iter_days()

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end


@dataclass(slots=True)
class AnalysisResult:
    """Statistics for one repository (or a group of them) over a range."""

    repository: str
    period: str
    start: date
    end: date
    stats: List[PeriodBucket] = field(default_factory=list)
    total: TotalStats = field(default_factory=TotalStats)

    @classmethod
    def build(cls, repository: str, period: Period, range_: DateRange, stats: List[PeriodBucket]) -> "AnalysisResult":
        return cls(
            repository=repository,
            period=str(period),
            start=range_.start,
            end=range_.end,
            stats=stats,
            total=TotalStats.from_buckets(stats),
        )

    def to_dict(self) -> Dict[str, object]:
        """Convert the result into a JSON friendly payload."""

        return {
            "repository": self.repository,
            "period": self.period,
            "from": self.start.isoformat(),
            "to": self.end.isoformat(),
            "stats": [bucket.to_dict() for bucket in self.stats],
            "total": self.total.to_dict(),
        }
