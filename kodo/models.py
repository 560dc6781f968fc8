"""Commit records produced by the repository reader."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional


@dataclass(slots=True)
class FileChange:
    """Line counts for one file touched by a commit."""

    path: str
    additions: int = 0
    deletions: int = 0

    @property
    def extension(self) -> Optional[str]:
        """Text after the final ``.`` of the file name, if any."""

        name = self.path.rsplit("/", 1)[-1]
        if "." not in name:
            return None
        return name.rsplit(".", 1)[1]

    def matches_extensions(self, extensions: Iterable[str]) -> bool:
        """Return True when the file's extension is in ``extensions``.

        Comparison is case-sensitive and entries are given without a
        leading dot.
        """

        ext = self.extension
        if ext is None:
            return False
        return any(ext == candidate for candidate in extensions)

    def to_dict(self) -> Dict[str, object]:
        return {"path": self.path, "additions": self.additions, "deletions": self.deletions}


@dataclass(slots=True)
class DiffStats:
    """Diff totals for a single commit."""

    additions: int = 0
    deletions: int = 0
    files_changed: int = 0
    files: List[FileChange] = field(default_factory=list)

    def add_file(self, change: FileChange) -> None:
        """Record a file change and fold its counts into the totals."""

        self.files.append(change)
        self.additions += change.additions
        self.deletions += change.deletions
        self.files_changed += 1

    def to_dict(self) -> Dict[str, object]:
        return {
            "additions": self.additions,
            "deletions": self.deletions,
            "files_changed": self.files_changed,
            "files": [change.to_dict() for change in self.files],
        }


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """Commit as seen by the statistics engine.

    Branch selection and merge exclusion have already been applied by the
    reader that produced it.
    """

    id: str
    timestamp: datetime
    is_merge: bool
    diff: DiffStats

    @property
    def date(self) -> date:
        """Calendar date of the commit in UTC."""

        ts = self.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return ts.astimezone(timezone.utc).date()


WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(slots=True)
class ActivityHistogram:
    """Commit counts by weekday (Monday first) and by hour of day."""

    weekday: List[int] = field(default_factory=lambda: [0] * 7)
    hourly: List[int] = field(default_factory=lambda: [0] * 24)

    @staticmethod
    def weekday_labels() -> tuple[str, ...]:
        return WEEKDAY_LABELS

    @classmethod
    def from_commits(cls, commits: Iterable[CommitRecord]) -> "ActivityHistogram":
        """Count commits per weekday and hour using each commit's own clock."""

        histogram = cls()
        for commit in commits:
            ts = commit.timestamp
            histogram.weekday[ts.weekday()] += 1
            histogram.hourly[ts.hour] += 1
        return histogram

    def to_dict(self) -> Dict[str, List[int]]:
        return {"weekday": list(self.weekday), "hourly": list(self.hourly)}
