"""Configuration file handling for kodo."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli  # type: ignore[no-redef]
import typer
from pydantic import BaseModel, ValidationError, field_validator
from tomli_w import dump as toml_dump

from .exceptions import ConfigInvalidError, ConfigNotFoundError

APP_NAME = "kodo"
CONFIG_FILENAME = "config.toml"
CONFIG_VERSION = "1.0.0"
CONFIG_ENV_VAR = "KODO_CONFIG"


def expand_tilde(path: Path | str) -> Path:
    """Expand a leading ``~`` to the user's home directory."""

    return Path(path).expanduser()


def default_config_path() -> Path:
    """Location of the config file when ``--config`` is not given.

    Order: ``$KODO_CONFIG``, ``~/.config/kodo/config.toml`` when it exists,
    then the platform's application directory.
    """

    env_path = os.getenv(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return expand_tilde(env_path)

    xdg_path = Path.home() / ".config" / APP_NAME / CONFIG_FILENAME
    if xdg_path.exists():
        return xdg_path

    return Path(typer.get_app_dir(APP_NAME)) / CONFIG_FILENAME


class RepoConfig(BaseModel):
    """One repository entry."""

    name: str
    path: str
    branch: Optional[str] = None

    @field_validator("name", "path")
    @classmethod
    def validate_not_blank(cls, v: str, info) -> str:
        """Reject empty names and paths."""
        if not v.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return v

    @property
    def expanded_path(self) -> Path:
        return expand_tilde(self.path)


class DefaultsConfig(BaseModel):
    """Default values used when running analyses."""

    days: int = 7
    exclude_merges: bool = True

    @field_validator("days")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate that days is positive."""
        if v <= 0:
            raise ValueError(f"days must be positive, got {v}")
        return v


@dataclass(slots=True)
class Config:
    """Top-level configuration container."""

    version: str = CONFIG_VERSION
    repositories: List[RepoConfig] = field(default_factory=list)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, path: Path, require_repositories: bool = True) -> "Config":
        """Load configuration data from disk.

        Args:
            path: Configuration file to read.
            require_repositories: Reject files without any repository entry.

        Returns:
            Config: The loaded configuration object.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigInvalidError: If the file is corrupted or fails validation.
        """

        if not path.exists():
            raise ConfigNotFoundError(path)

        try:
            with path.open("rb") as handle:
                raw: Dict[str, Any] = tomli.load(handle)
        except (OSError, tomli.TOMLDecodeError) as exc:
            raise ConfigInvalidError(f"Failed to parse configuration file {path}") from exc

        version = raw.get("version", CONFIG_VERSION)

        try:
            repositories = [RepoConfig(**entry) for entry in raw.get("repositories", [])]
            defaults = DefaultsConfig(**raw.get("defaults", {}))
        except (ValidationError, TypeError) as exc:
            raise ConfigInvalidError(f"Invalid configuration in {path}") from exc

        if require_repositories and not repositories:
            raise ConfigInvalidError(f"No repositories configured in {path}")

        return cls(version=version, repositories=repositories, defaults=defaults)

    def dump(self, path: Path, backup: bool = True) -> None:
        """Persist the configuration to disk.

        Args:
            path: Path to save the configuration file.
            backup: If True and config file exists, create a backup before overwriting.
        """

        path.parent.mkdir(parents=True, exist_ok=True)

        if backup and path.exists():
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            backup_path = path.parent / f"{path.stem}.{timestamp}.bak"
            shutil.copy2(path, backup_path)

        payload: Dict[str, Any] = {
            "version": self.version,
            "defaults": self.defaults.model_dump(),
            "repositories": [repo.model_dump(exclude_none=True) for repo in self.repositories],
        }

        with path.open("wb") as handle:
            toml_dump(payload, handle)

    def add_repository(self, name: str, path: str, branch: Optional[str] = None) -> RepoConfig:
        """Add a repository entry, rejecting duplicate names."""

        if any(repo.name == name for repo in self.repositories):
            raise ConfigInvalidError(f"Repository '{name}' is already configured")
        try:
            repo = RepoConfig(name=name, path=path, branch=branch)
        except ValidationError as exc:
            raise ConfigInvalidError(f"Invalid repository entry '{name}'") from exc
        self.repositories.append(repo)
        return repo

    def to_display_dict(self) -> Dict[str, Any]:
        """Return a serialisable representation for display purposes."""

        return {
            "defaults": self.defaults.model_dump(),
            "repositories": {
                repo.name: f"{repo.path}" + (f" ({repo.branch})" if repo.branch else "")
                for repo in self.repositories
            },
        }
