"""Custom exceptions for kodo."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Sequence


class KodoError(Exception):
    """Base exception for all kodo errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(KodoError):
    """Raised when there's a configuration problem."""
    pass


class ConfigNotFoundError(ConfigurationError):
    """Raised when an explicitly requested config file does not exist."""

    def __init__(self, path: Path):
        """Initialize config-not-found error.

        Args:
            path: Location that was searched
        """
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ConfigInvalidError(ConfigurationError):
    """Raised when the config file cannot be parsed or fails validation."""
    pass


# =============================================================================
# Repository Errors
# =============================================================================


class RepositoryError(KodoError):
    """Base exception for repository access errors."""

    def __init__(self, message: str, path: Path | None = None):
        """Initialize repository error.

        Args:
            message: Error message
            path: Repository path involved, if any
        """
        super().__init__(message)
        self.path = path


class RepositoryOpenError(RepositoryError):
    """Raised when a path cannot be opened as a git repository."""
    pass


class NoRepositoriesError(RepositoryError):
    """Raised when no repository could be resolved for analysis."""

    def __init__(self, message: str = "No git repositories found. Use --repo or add repositories to the config file."):
        super().__init__(message)


class GitCommandError(RepositoryError):
    """Raised when a git subprocess exits with an error."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str, path: Path | None = None):
        """Initialize git command error.

        Args:
            args: Command arguments passed to git
            returncode: Exit status of the process
            stderr: Captured standard error
            path: Repository the command ran in
        """
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"git {' '.join(args)} failed: {detail}", path=path)
        self.returncode = returncode
        self.stderr = stderr


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(KodoError):
    """Base exception for validation errors."""
    pass


class InvalidDateRangeError(ValidationError):
    """Raised when date range is invalid."""
    pass


# =============================================================================
# Output Errors
# =============================================================================


class OutputError(KodoError):
    """Raised when results cannot be formatted or written."""
    pass


class TerminalError(KodoError):
    """Raised when the interactive terminal cannot be set up."""
    pass


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield the chain of causes behind ``exc``, nearest first."""
    seen = {id(exc)}
    current = exc.__cause__ or exc.__context__
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__
