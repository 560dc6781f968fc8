"""Rich console pre-configured for kodo's output."""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console as RichConsole
from rich.theme import Theme

from .exceptions import iter_causes

_default_theme = Theme(
    {
        "accent": "bold rgb(255,149,0)",
        "muted": "dim",
        "info": "rgb(120,200,255)",
        "title": "bold rgb(120,200,255)",
        "repo": "bold italic rgb(191,160,255)",
        "label": "bold rgb(160,160,160)",
        "value": "rgb(240,240,240)",
        "success": "bold rgb(104,255,203)",
        "warning": "bold rgb(255,213,128)",
        "danger": "bold rgb(255,128,128)",
        "divider": "rgb(85,85,85)",
        "frame": "rgb(112,141,242)",
        "additions": "green",
        "deletions": "red",
    }
)


class Console(RichConsole):
    """Rich console with a custom theme and verbose/quiet modes."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:  # noqa: D401 - mirror rich API
        theme = kwargs.pop("theme", None) or _default_theme
        if os.getenv("KODO_NO_COLOR", "").lower() in ("1", "true", "yes"):
            kwargs.setdefault("no_color", True)
        super().__init__(*args, theme=theme, **kwargs)
        self._verbose = False
        self._quiet = False

    def set_verbose(self, verbose: bool) -> None:
        """Enable or disable verbose output."""
        self._verbose = verbose

    def set_quiet(self, quiet: bool) -> None:
        """Enable or disable quiet mode."""
        self._quiet = quiet

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print with respect to quiet mode."""
        if not self._quiet:
            super().print(*args, **kwargs)

    def log(self, *args: Any, **kwargs: Any) -> None:
        """Log with respect to verbose mode."""
        if self._verbose and not self._quiet:
            super().log(*args, **kwargs)

    def print_error(self, error: BaseException | str, context: str = "") -> None:
        """Print an error followed by its chain of causes.

        Errors are printed even in quiet mode.

        Args:
            error: Exception instance or error message string
            context: Optional prefix replacing the default ``error:`` label
        """
        label = context or "error:"
        super().print(f"[danger]{label}[/] {error}", highlight=False)
        if isinstance(error, BaseException):
            for cause in iter_causes(error):
                super().print(f"  [muted]caused by:[/] {cause}", highlight=False)

    def print_success(self, message: str) -> None:
        self.print(f"[success]{message}[/]")

    def print_warning(self, message: str) -> None:
        self.print(f"[warning]{message}[/]")


__all__ = ["Console"]
