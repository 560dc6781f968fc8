"""Terminal input events for the dashboard.

A single background thread polls the input device and feeds a FIFO queue;
the dashboard loop takes exactly one event per iteration.
"""

from __future__ import annotations

import logging
import os
import queue
import select
import shutil
import sys
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 0.25

_ESCAPE_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[Z": "backtab",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1b[5~": "pageup",
    "\x1b[6~": "pagedown",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
}

# Code for CSI/SS3 sequences without a name, e.g. Ctrl+arrow or F5.
UNKNOWN_KEY = "unknown"

_CONTROL_KEYS = {
    "\t": "tab",
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
}


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A key press: a printable character or a named key such as ``up``."""

    code: str
    ctrl: bool = False
    alt: bool = False


@dataclass(frozen=True, slots=True)
class KeyPress:
    key: KeyEvent


@dataclass(frozen=True, slots=True)
class Resize:
    columns: int
    rows: int


@dataclass(frozen=True, slots=True)
class Tick:
    pass


Event = Union[KeyPress, Resize, Tick]


def _sequence_end(data: str, start: int) -> int:
    """Index just past the CSI or SS3 sequence beginning at ``data[start]``.

    SS3 (``ESC O``) takes exactly one final character. CSI (``ESC [``) takes
    parameter bytes 0x30-0x3F, then intermediate bytes 0x20-0x2F, then one
    final byte 0x40-0x7E. A truncated sequence ends where the input does.
    """
    i = start + 2
    if data[start + 1] == "O":
        return min(i + 1, len(data))
    while i < len(data) and "\x30" <= data[i] <= "\x3f":
        i += 1
    while i < len(data) and "\x20" <= data[i] <= "\x2f":
        i += 1
    if i < len(data) and "\x40" <= data[i] <= "\x7e":
        i += 1
    return i


def decode_keys(data: str) -> List[KeyEvent]:
    """Split raw terminal input into key events."""

    keys: List[KeyEvent] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b":
            nxt = data[i + 1] if i + 1 < len(data) else ""
            if nxt in ("[", "O"):
                end = _sequence_end(data, i)
                keys.append(KeyEvent(_ESCAPE_SEQUENCES.get(data[i:end], UNKNOWN_KEY)))
                i = end
            elif nxt and nxt != "\x1b":
                keys.append(KeyEvent(nxt, alt=True))
                i += 2
            else:
                keys.append(KeyEvent("esc"))
                i += 1
            continue
        if ch in _CONTROL_KEYS:
            keys.append(KeyEvent(_CONTROL_KEYS[ch]))
        elif "\x01" <= ch <= "\x1a":
            keys.append(KeyEvent(chr(ord(ch) + 96), ctrl=True))
        elif ch.isprintable():
            keys.append(KeyEvent(ch))
        i += 1
    return keys


def read_stdin(timeout: float) -> Optional[str]:
    """Wait up to ``timeout`` seconds for terminal input.

    Returns the available characters, or None on timeout.
    """
    fd = sys.stdin.fileno()
    ready, _, _ = select.select([fd], [], [], timeout)
    if not ready:
        return None
    data = os.read(fd, 1024)
    if not data:
        raise EOFError("stdin closed")
    return data.decode("utf-8", errors="ignore")


def terminal_size() -> Tuple[int, int]:
    size = shutil.get_terminal_size()
    return size.columns, size.lines


class EventHandler:
    """Background poller that turns terminal input into queued events.

    The poller thread is a daemon and may be abandoned at exit. Once it has
    stopped, :meth:`next` keeps returning :class:`Tick` instead of failing.
    """

    def __init__(
        self,
        tick_rate: float = DEFAULT_TICK_RATE,
        reader: Callable[[float], Optional[str]] = read_stdin,
        size_probe: Callable[[], Tuple[int, int]] = terminal_size,
    ) -> None:
        self.tick_rate = tick_rate
        self._reader = reader
        self._size_probe = size_probe
        self._queue: "queue.Queue[Event]" = queue.Queue()
        self._stop = threading.Event()
        self._closed = threading.Event()
        self._thread = threading.Thread(target=self._poll, name="kodo-events", daemon=True)
        self._thread.start()

    def _poll(self) -> None:
        last_size = self._size_probe()
        try:
            while not self._stop.is_set():
                data = self._reader(self.tick_rate)

                size = self._size_probe()
                if size != last_size:
                    last_size = size
                    self._queue.put(Resize(*size))

                if data is None:
                    self._queue.put(Tick())
                    continue
                for key in decode_keys(data):
                    self._queue.put(KeyPress(key))
        except (OSError, EOFError, ValueError) as exc:
            logger.debug("Input poller stopped: %s", exc)
        finally:
            self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def next(self) -> Event:
        """Block until the next event arrives, in arrival order."""

        if self._stop.is_set():
            return Tick()
        while True:
            try:
                return self._queue.get(timeout=self.tick_rate)
            except queue.Empty:
                if self.closed:
                    return Tick()

    def close(self) -> None:
        """Ask the poller to stop after its current poll."""

        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the poller thread; returns True once it has stopped."""

        self._thread.join(timeout)
        return self.closed


__all__ = [
    "DEFAULT_TICK_RATE",
    "Event",
    "EventHandler",
    "KeyEvent",
    "KeyPress",
    "Resize",
    "Tick",
    "UNKNOWN_KEY",
    "decode_keys",
]
