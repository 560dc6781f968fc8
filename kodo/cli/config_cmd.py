"""``kodo config`` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.table import Table

from ..config import Config, default_config_path
from ..console import Console
from ..exceptions import ConfigNotFoundError, KodoError

console = Console()
error_console = Console(stderr=True)

config_app = typer.Typer(help="Manage the configuration file")

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to the config file (defaults to $KODO_CONFIG or ~/.config/kodo/config.toml)",
)


def _config_path(path: Optional[Path]) -> Path:
    return path or default_config_path()


def _fail(exc: KodoError) -> typer.Exit:
    error_console.print_error(exc)
    return typer.Exit(code=1)


def print_config_summary(config: Config, path: Path) -> None:
    """Render the configuration as a table."""

    data = config.to_display_dict()
    table = Table(
        title=f"kodo configuration ({path})",
        box=box.ROUNDED,
        title_style="title",
        border_style="frame",
        expand=True,
        show_lines=True,
    )
    table.add_column("Section", style="label", no_wrap=True)
    table.add_column("Values", style="value")

    for section, values in data.items():
        if values:
            rendered = "\n".join(f"[label]{k}[/]: [value]{v}[/]" for k, v in values.items())
        else:
            rendered = "[muted](none)[/]"
        table.add_row(f"[accent]{section}[/]", rendered)

    console.print(table)


@config_app.command("show")
def show_config(config_path: Optional[Path] = ConfigOption) -> None:
    """Display the resolved configuration."""

    path = _config_path(config_path)
    try:
        config = Config.load(path, require_repositories=False)
    except KodoError as exc:
        raise _fail(exc) from exc
    print_config_summary(config, path)


@config_app.command("init")
def init_config(
    config_path: Optional[Path] = ConfigOption,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config file"),
) -> None:
    """Write a starter configuration file."""

    path = _config_path(config_path)
    if path.exists() and not force:
        console.print_warning(f"Config file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    Config().dump(path, backup=force)
    console.print_success(f"✓ Wrote {path}")
    console.print("[muted]Add repositories with[/] kodo config add-repo NAME PATH")


@config_app.command("add-repo")
def add_repo(
    name: str = typer.Argument(..., help="Display name of the repository"),
    path: str = typer.Argument(..., help="Path to the repository (~ is expanded)"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to analyse instead of HEAD"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Add a repository to the configuration file."""

    target = _config_path(config_path)
    try:
        try:
            config = Config.load(target, require_repositories=False)
        except ConfigNotFoundError:
            config = Config()
        repo = config.add_repository(name, path, branch)
        config.dump(target)
    except KodoError as exc:
        raise _fail(exc) from exc

    suffix = f" ({repo.branch})" if repo.branch else ""
    console.print_success(f"✓ Added {repo.name}: {repo.path}{suffix}")
