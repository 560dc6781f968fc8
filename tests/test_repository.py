from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from kodo.exceptions import GitCommandError, RepositoryOpenError
from kodo.git import Repository, is_git_repository, parse_log_output
from kodo.git.repository import normalize_numstat_path, parse_numstat_line

from conftest import git, requires_git

LOG_OUTPUT = """\
@@@3f2a9c1d0e8b7a6f5e4d3c2b1a09f8e7d6c5b4a3\t1111111111111111111111111111111111111111\t2024-01-02T10:15:00+09:00
12\t3\tsrc/main.rs
-\t-\tassets/logo.png

@@@aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa\t2222222222222222222222222222222222222222 3333333333333333333333333333333333333333\t2024-01-01T23:00:00Z
@@@bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb\t\t2023-12-31T08:00:00-05:00
4\t0\tsrc/{old => new}/lib.rs
"""


def test_parse_log_output() -> None:
    commits = list(parse_log_output(LOG_OUTPUT.splitlines()))

    assert [commit.id for commit in commits] == ["3f2a9c1", "aaaaaaa", "bbbbbbb"]
    first, merge, root = commits

    assert first.is_merge is False
    assert first.timestamp == datetime(2024, 1, 2, 1, 15, tzinfo=timezone.utc)
    assert first.date == date(2024, 1, 2)
    assert (first.diff.additions, first.diff.deletions, first.diff.files_changed) == (15, 3, 2)

    assert merge.is_merge is True
    assert merge.diff.files_changed == 0

    assert root.is_merge is False
    assert root.diff.files[0].path == "src/new/lib.rs"


def test_binary_files_count_with_zero_lines() -> None:
    change = parse_numstat_line("-\t-\tassets/logo.png")

    assert change is not None
    assert (change.path, change.additions, change.deletions) == ("assets/logo.png", 0, 0)
    assert change.extension == "png"


def test_malformed_numstat_line_is_skipped() -> None:
    assert parse_numstat_line("not a numstat line") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("old.txt => new.txt", "new.txt"),
        ("src/{a => b}/mod.rs", "src/b/mod.rs"),
        ("src/{ => nested}/mod.rs", "src/nested/mod.rs"),
        ("src/{gone => }/mod.rs", "src/mod.rs"),
        ("plain/path.py", "plain/path.py"),
    ],
)
def test_normalize_numstat_path(raw: str, expected: str) -> None:
    assert normalize_numstat_path(raw) == expected


def test_open_missing_path(tmp_path: Path) -> None:
    with pytest.raises(RepositoryOpenError):
        Repository.open(tmp_path / "missing", "missing")


def test_is_git_repository(tmp_path: Path) -> None:
    assert is_git_repository(tmp_path) is False
    (tmp_path / ".git").mkdir()
    assert is_git_repository(tmp_path) is True


@requires_git
def test_commits_in_range_reads_numstat(git_repo: Path) -> None:
    repo = Repository.open(git_repo, "demo")

    commits = repo.commits_in_range(date(2024, 1, 1), date(2024, 1, 7))

    assert [commit.date for commit in commits] == [date(2024, 1, 4), date(2024, 1, 3), date(2024, 1, 1)]
    assert not any(commit.is_merge for commit in commits)
    second = commits[1]
    assert second.diff.files_changed == 2
    assert second.diff.additions == 3
    assert second.diff.deletions == 1


@requires_git
def test_commits_in_range_can_include_merges(git_repo: Path) -> None:
    repo = Repository.open(git_repo, "demo")

    commits = repo.commits_in_range(date(2024, 1, 1), date(2024, 1, 7), exclude_merges=False)

    assert sum(commit.is_merge for commit in commits) == 1


@requires_git
def test_commits_in_range_honours_range_and_branch(git_repo: Path) -> None:
    repo = Repository.open(git_repo, "demo")

    assert len(repo.commits_in_range(date(2024, 1, 2), date(2024, 1, 3))) == 1
    assert repo.commits_in_range(date(2024, 2, 1), date(2024, 2, 7)) == []
    with pytest.raises(GitCommandError):
        repo.commits_in_range(date(2024, 1, 1), date(2024, 1, 7), branch="no-such-branch")


@requires_git
def test_empty_repository_has_no_commits(tmp_path: Path) -> None:
    git(tmp_path, "init", "-q")

    repo = Repository.open(tmp_path, "empty")

    assert repo.commits_in_range(date(2024, 1, 1), date(2024, 1, 7)) == []


@requires_git
def test_open_plain_directory_fails(tmp_path: Path) -> None:
    with pytest.raises(RepositoryOpenError) as excinfo:
        Repository.open(tmp_path, "plain")
    assert isinstance(excinfo.value.__cause__, GitCommandError)
