"""Raw terminal mode for the dashboard."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, TextIO

from ..exceptions import TerminalError

logger = logging.getLogger(__name__)


@contextmanager
def raw_terminal(stream: TextIO | None = None) -> Iterator[None]:
    """Put the terminal behind ``stream`` (stdin by default) into raw mode.

    Echo, line buffering and signal keys are disabled so every key press
    reaches the event poller unmodified; the previous settings are restored
    when the block exits, whether normally or by an exception.

    Raises:
        TerminalError: If ``stream`` is not an interactive POSIX terminal.
    """
    try:
        import termios
    except ImportError as exc:
        raise TerminalError("The dashboard needs a POSIX terminal; use --output json or csv") from exc

    if stream is None:
        stream = sys.stdin
    if not stream.isatty():
        raise TerminalError("stdin is not a terminal; use --output json or csv")

    fd = stream.fileno()
    try:
        saved = termios.tcgetattr(fd)
    except termios.error as exc:
        raise TerminalError("Failed to read terminal attributes") from exc

    raw = termios.tcgetattr(fd)
    raw[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
    raw[6][termios.VMIN] = 1
    raw[6][termios.VTIME] = 0
    termios.tcsetattr(fd, termios.TCSAFLUSH, raw)
    logger.debug("Terminal switched to raw mode")
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSAFLUSH, saved)
        logger.debug("Terminal settings restored")
