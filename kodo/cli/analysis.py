"""Repository resolution and statistics collection for the analysis command."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import Config, default_config_path
from ..exceptions import NoRepositoriesError
from ..git import Repository, is_git_repository
from ..models import ActivityHistogram, CommitRecord
from ..stats import AnalysisResult, DateRange, Period, collect_stats

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RepositoryTarget:
    """A repository to read together with the branch to read from."""

    repository: Repository
    branch: Optional[str] = None

    @property
    def name(self) -> str:
        return self.repository.name


def parse_extensions(values: Optional[Iterable[str]]) -> Optional[List[str]]:
    """Flatten repeated/comma-separated ``--ext`` values; ``.rs`` and ``rs`` are equal."""

    if not values:
        return None
    extensions: List[str] = []
    for value in values:
        for part in value.split(","):
            part = part.strip().lstrip(".")
            if part and part not in extensions:
                extensions.append(part)
    return extensions or None


def load_config(path: Optional[Path]) -> Optional[Config]:
    """Load the config file, if there is one.

    An explicitly requested file must exist; the default location is
    optional. A file that exists but fails to parse is always an error.
    """

    if path is not None:
        return Config.load(path, require_repositories=False)

    default_path = default_config_path()
    if not default_path.exists():
        logger.debug("No config file at %s", default_path)
        return None
    return Config.load(default_path, require_repositories=False)


def resolve_repositories(
    repo: Optional[Path],
    config: Optional[Config],
    names: Sequence[str] = (),
    branch: Optional[str] = None,
    cwd: Optional[Path] = None,
) -> List[RepositoryTarget]:
    """Pick the repositories to analyse.

    ``--repo`` wins over the config file, which wins over the current
    directory. Configured entries are filtered by ``names`` and entries whose
    path is not a git repository are skipped with a warning.

    Raises:
        NoRepositoriesError: If nothing usable was found.
        RepositoryOpenError: If a chosen path cannot be opened.
    """

    if repo is not None:
        path = repo.expanduser().resolve()
        return [RepositoryTarget(Repository.open(path, path.name), branch)]

    if config is not None and config.repositories:
        entries = config.repositories
        if names:
            entries = [entry for entry in entries if entry.name in names]
            if not entries:
                raise NoRepositoriesError(f"No configured repository named {', '.join(names)}")

        targets = []
        for entry in entries:
            path = entry.expanded_path
            if not is_git_repository(path):
                logger.warning("Skipping %s: %s is not a git repository", entry.name, path)
                continue
            targets.append(RepositoryTarget(Repository.open(path, entry.name), branch or entry.branch))
        if targets:
            return targets

    cwd = cwd or Path.cwd()
    if (cwd / ".git").exists():
        return [RepositoryTarget(Repository.open(cwd, cwd.name), branch)]

    raise NoRepositoriesError()


def result_label(targets: Sequence[RepositoryTarget]) -> str:
    if len(targets) == 1:
        return targets[0].name
    return f"{len(targets)} repos"


def read_commits(
    targets: Sequence[RepositoryTarget],
    range_: DateRange,
    exclude_merges: bool = True,
) -> List[CommitRecord]:
    """Read and concatenate the commits of every target in ``range_``."""

    commits: List[CommitRecord] = []
    for target in targets:
        found = target.repository.commits_in_range(
            range_.start,
            range_.end,
            branch=target.branch,
            exclude_merges=exclude_merges,
        )
        logger.info("%s: %d commits", target.name, len(found))
        commits.extend(found)
    return commits


def analyze(
    targets: Sequence[RepositoryTarget],
    range_: DateRange,
    period: Period = Period.DAILY,
    extensions: Optional[Sequence[str]] = None,
    exclude_merges: bool = True,
) -> Tuple[AnalysisResult, ActivityHistogram]:
    """Collect bucketed statistics and the activity histogram for ``targets``."""

    commits = read_commits(targets, range_, exclude_merges=exclude_merges)
    result = collect_stats(result_label(targets), commits, range_, period, extensions)
    return result, ActivityHistogram.from_commits(commits)


__all__ = [
    "RepositoryTarget",
    "analyze",
    "load_config",
    "parse_extensions",
    "read_commits",
    "resolve_repositories",
    "result_label",
]
