"""Command line interface for kodo."""

from __future__ import annotations

import logging
import sys
from contextlib import nullcontext
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer

from ..console import Console
from ..exceptions import KodoError
from ..output import formatter_for
from ..stats import DateRange, Period
from .analysis import analyze, load_config, parse_extensions, resolve_repositories
from .config_cmd import config_app

DEFAULT_DAYS = 7
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = typer.Typer(
    help="Git commit statistics as JSON, CSV or an interactive terminal dashboard.",
    no_args_is_help=False,
)
app.add_typer(config_app, name="config")

# Status and errors go to stderr so stdout only ever carries JSON or CSV.
console = Console(stderr=True)


class OutputFormat(str, Enum):
    TUI = "tui"
    JSON = "json"
    CSV = "csv"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the config file (defaults to $KODO_CONFIG or ~/.config/kodo/config.toml)",
    ),
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        "-r",
        help="Analyse this repository instead of the configured ones",
    ),
    repo_names: Optional[List[str]] = typer.Option(
        None,
        "--repo-name",
        "-n",
        help="Only analyse configured repositories with this name (repeatable)",
    ),
    days: Optional[int] = typer.Option(
        None,
        "--days",
        "-d",
        help="Number of days to analyse, ending today (default from config, else 7)",
    ),
    include_merges: bool = typer.Option(False, "--include-merges", help="Count merge commits"),
    output: OutputFormat = typer.Option(OutputFormat.TUI, "--output", "-o", help="Output format"),
    period: Period = typer.Option(Period.DAILY, "--period", "-p", help="Bucket size"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to read instead of HEAD"),
    ext: Optional[List[str]] = typer.Option(
        None,
        "--ext",
        "-e",
        help="Only count files with these extensions, e.g. --ext rs,ts (repeatable)",
    ),
    single_metric: bool = typer.Option(False, "--single-metric", help="Start the dashboard in single-chart mode"),
    no_header: bool = typer.Option(False, "--no-header", help="Omit the CSV header row"),
    compact: bool = typer.Option(False, "--compact", help="Emit compact JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress progress output"),
) -> None:
    """Analyse commit activity over the last N days."""

    configure_logging(verbose)
    console.set_verbose(verbose)
    console.set_quiet(quiet)

    if ctx.invoked_subcommand is not None:
        return

    try:
        config = load_config(config_path)
        defaults = config.defaults if config is not None else None
        if days is None:
            days = defaults.days if defaults else DEFAULT_DAYS
        range_ = DateRange.last_n_days(days)
        exclude_merges = False if include_merges else (defaults.exclude_merges if defaults else True)

        targets = resolve_repositories(repo, config, repo_names or (), branch)
        noun = "repository" if len(targets) == 1 else "repositories"
        status = nullcontext() if quiet else console.status(f"[accent]Reading {len(targets)} {noun}...", spinner="dots")
        with status:
            result, activity = analyze(
                targets,
                range_,
                period=period,
                extensions=parse_extensions(ext),
                exclude_merges=exclude_merges,
            )

        if output is OutputFormat.TUI:
            from ..tui import run_dashboard

            run_dashboard(result, activity, single_metric=single_metric)
            return

        formatter = formatter_for(output.value, include_headers=not no_header, pretty=not compact)
        rendered = formatter.format(result)
    except KodoError as exc:
        console.print_error(exc)
        raise typer.Exit(code=1) from exc

    typer.echo(rendered, nl=not rendered.endswith("\n"))


def main() -> None:
    app(prog_name="kodo")


__all__ = ["OutputFormat", "app", "main"]
