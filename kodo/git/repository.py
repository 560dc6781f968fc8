"""Read commit records from a local git repository."""

from __future__ import annotations

import logging
import re
import subprocess
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from ..exceptions import GitCommandError, RepositoryOpenError
from ..models import CommitRecord, DiffStats, FileChange

logger = logging.getLogger(__name__)

COMMIT_MARKER = "@@@"
SHORT_ID_LENGTH = 7
GIT_TIMEOUT_SECONDS = 300

# One header line per commit followed by its --numstat lines.
LOG_FORMAT = f"{COMMIT_MARKER}%H%x09%P%x09%cI"

_BRACE_RENAME = re.compile(r"\{([^{}]*) => ([^{}]*)\}")
_EMPTY_REPO_HINTS = ("does not have any commits", "unknown revision or path not in the working tree")


def run_git(args: Sequence[str], cwd: Path, timeout_s: int = GIT_TIMEOUT_SECONDS) -> str:
    """Run git in ``cwd`` and return its stdout.

    Raises:
        RepositoryOpenError: If the git executable cannot be started.
        GitCommandError: If git exits with a non-zero status.
    """
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout_s,
        )
    except FileNotFoundError as exc:
        raise RepositoryOpenError("git executable not found on PATH", path=cwd) from exc
    except NotADirectoryError as exc:
        raise RepositoryOpenError(f"Not a directory: {cwd}", path=cwd) from exc
    except subprocess.TimeoutExpired as exc:
        raise GitCommandError(list(args), -1, f"timed out after {timeout_s}s", path=cwd) from exc

    if proc.returncode != 0:
        raise GitCommandError(list(args), proc.returncode, proc.stderr, path=cwd)
    return proc.stdout


def normalize_numstat_path(path: str) -> str:
    """Resolve rename notation from ``--numstat`` to the new path.

    Handles both ``old => new`` and ``dir/{old => new}/file``.
    """
    p = path.strip()
    if "{" in p and " => " in p:
        p = _BRACE_RENAME.sub(lambda m: m.group(2), p)
        return p.replace("//", "/")
    if " => " in p:
        return p.split(" => ", 1)[1].strip()
    return p


def parse_numstat_line(line: str) -> Optional[FileChange]:
    """Parse ``<added>\\t<deleted>\\t<path>``; binary files count as zero lines."""

    parts = line.split("\t", 2)
    if len(parts) != 3:
        return None
    added, deleted, path = parts
    return FileChange(
        path=normalize_numstat_path(path),
        additions=int(added) if added.isdigit() else 0,
        deletions=int(deleted) if deleted.isdigit() else 0,
    )


def _parse_header(line: str) -> tuple[str, bool, datetime]:
    sha, parents, stamp = line[len(COMMIT_MARKER):].split("\t", 2)
    timestamp = datetime.fromisoformat(stamp.strip().replace("Z", "+00:00"))
    return sha[:SHORT_ID_LENGTH], len(parents.split()) > 1, timestamp


def parse_log_output(lines: Iterable[str]) -> Iterator[CommitRecord]:
    """Turn ``git log --numstat`` output in :data:`LOG_FORMAT` into commit records."""

    header: Optional[tuple[str, bool, datetime]] = None
    diff = DiffStats()

    for raw in lines:
        line = raw.rstrip("\n")
        if line.startswith(COMMIT_MARKER):
            if header is not None:
                yield CommitRecord(id=header[0], is_merge=header[1], timestamp=header[2], diff=diff)
            header = _parse_header(line)
            diff = DiffStats()
            continue
        if not line.strip() or header is None:
            continue
        change = parse_numstat_line(line)
        if change is not None:
            diff.add_file(change)

    if header is not None:
        yield CommitRecord(id=header[0], is_merge=header[1], timestamp=header[2], diff=diff)


class Repository:
    """A git working tree or bare repository on disk."""

    def __init__(self, path: Path, name: str) -> None:
        self.path = path
        self.name = name

    @classmethod
    def open(cls, path: Path, name: str) -> "Repository":
        """Open ``path`` after checking that git recognises it.

        Raises:
            RepositoryOpenError: If the path is missing or is not a repository.
        """
        if not path.exists():
            raise RepositoryOpenError(f"Repository path does not exist: {path}", path=path)
        try:
            run_git(["rev-parse", "--git-dir"], cwd=path)
        except GitCommandError as exc:
            raise RepositoryOpenError(f"Not a git repository: {path}", path=path) from exc
        return cls(path, name)

    def commits_in_range(
        self,
        start: date,
        end: date,
        branch: Optional[str] = None,
        exclude_merges: bool = True,
    ) -> List[CommitRecord]:
        """Commits on ``branch`` (HEAD by default) whose UTC date is in ``[start, end]``."""

        args = [
            "log",
            branch or "HEAD",
            f"--since={start.isoformat()}T00:00:00Z",
            f"--until={end.isoformat()}T23:59:59Z",
            f"--pretty=format:{LOG_FORMAT}",
            "--numstat",
            "-M",
        ]
        if exclude_merges:
            args.insert(2, "--no-merges")
        args.append("--")

        try:
            output = run_git(args, cwd=self.path)
        except GitCommandError as exc:
            if branch is None and any(hint in exc.stderr for hint in _EMPTY_REPO_HINTS):
                logger.info("Repository %s has no commits yet", self.name)
                return []
            raise

        commits = [
            commit
            for commit in parse_log_output(output.splitlines())
            if start <= commit.date <= end
        ]
        logger.debug("Read %d commits from %s", len(commits), self.name)
        return commits

    def __repr__(self) -> str:
        return f"Repository(name={self.name!r}, path={str(self.path)!r})"


def is_git_repository(path: Path) -> bool:
    """Cheap on-disk check used when filtering configured repositories."""

    return path.exists() and ((path / ".git").exists() or (path / "HEAD").exists())


__all__ = [
    "Repository",
    "is_git_repository",
    "normalize_numstat_path",
    "parse_log_output",
    "parse_numstat_line",
    "run_git",
]
