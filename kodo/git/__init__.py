"""Git repository access."""

from .repository import Repository, is_git_repository, parse_log_output, run_git

__all__ = ["Repository", "is_git_repository", "parse_log_output", "run_git"]
