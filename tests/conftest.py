from __future__ import annotations

import os
import shutil
import subprocess
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Sequence, Tuple

import pytest

from kodo.models import CommitRecord, DiffStats, FileChange
from kodo.stats import AnalysisResult, DateRange, Period, collect_stats

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def make_commit(
    when: datetime | str,
    additions: int = 0,
    deletions: int = 0,
    files: Sequence[Tuple[str, int, int]] = (),
    commit_id: str = "abc1234",
    is_merge: bool = False,
) -> CommitRecord:
    """Build a commit; without ``files`` a single ``file.txt`` carries the counts."""

    if isinstance(when, str):
        when = datetime.fromisoformat(when)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    diff = DiffStats()
    for path, added, removed in files or [("file.txt", additions, deletions)]:
        diff.add_file(FileChange(path=path, additions=added, deletions=removed))
    return CommitRecord(id=commit_id, timestamp=when, is_merge=is_merge, diff=diff)


def git(repo: Path, *args: str, when: Optional[str] = None) -> None:
    """Run git in ``repo`` with a fixed identity and, optionally, a fixed date."""

    env = dict(os.environ)
    env.update(
        GIT_AUTHOR_NAME="Test",
        GIT_AUTHOR_EMAIL="test@example.com",
        GIT_COMMITTER_NAME="Test",
        GIT_COMMITTER_EMAIL="test@example.com",
        GIT_CONFIG_NOSYSTEM="1",
    )
    if when is not None:
        env["GIT_AUTHOR_DATE"] = when
        env["GIT_COMMITTER_DATE"] = when
    subprocess.run(
        ["git", "-c", "commit.gpgsign=false", *args],
        cwd=repo,
        env=env,
        check=True,
        capture_output=True,
    )


def commit_file(repo: Path, name: str, content: str, message: str, when: Optional[str] = None) -> None:
    (repo / name).write_text(content, encoding="utf-8")
    git(repo, "add", ".")
    git(repo, "commit", "-q", "-m", message, when=when)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Repository with commits on 01-01, 01-03, a feature commit on 01-04 and a merge on 01-05 (2024)."""

    repo = tmp_path / "demo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")

    commit_file(repo, "main.py", "a\nb\nc\n", "first", when="2024-01-01T10:00:00+00:00")
    (repo / "notes.md").write_text("hello\n", encoding="utf-8")
    commit_file(repo, "main.py", "a\nc\nd\ne\n", "second", when="2024-01-03T12:00:00+00:00")

    git(repo, "checkout", "-q", "-b", "feature")
    commit_file(repo, "feature.py", "x\n", "feature", when="2024-01-04T12:00:00+00:00")
    git(repo, "checkout", "-q", "main")
    git(repo, "merge", "-q", "--no-ff", "-m", "merge feature", "feature", when="2024-01-05T12:00:00+00:00")
    return repo


@pytest.fixture
def first_week() -> DateRange:
    return DateRange(date(2024, 1, 1), date(2024, 1, 7))


@pytest.fixture
def sample_result(first_week: DateRange) -> AnalysisResult:
    commits = [
        make_commit("2024-01-01T10:00:00", 100, 10),
        make_commit("2024-01-01T15:00:00", 50, 5),
        make_commit("2024-01-02T09:30:00", 30, 3),
    ]
    return collect_stats("demo", commits, first_week, Period.DAILY)
