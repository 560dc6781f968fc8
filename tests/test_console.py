from __future__ import annotations

import io
import os

import pytest

from kodo.console import Console
from kodo.exceptions import ConfigInvalidError, KodoError, TerminalError, iter_causes
from kodo.tui.terminal import raw_terminal


def _console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


def _chained_error() -> ConfigInvalidError:
    try:
        try:
            raise OSError("disk unplugged")
        except OSError as exc:
            raise ValueError("bad table header") from exc
    except ValueError as exc:
        error = ConfigInvalidError("Failed to parse configuration file")
        error.__cause__ = exc
        return error


def test_iter_causes_walks_the_chain() -> None:
    causes = list(iter_causes(_chained_error()))

    assert [str(cause) for cause in causes] == ["bad table header", "disk unplugged"]


def test_iter_causes_stops_on_cycles() -> None:
    first = KodoError("first")
    second = KodoError("second")
    first.__cause__ = second
    second.__cause__ = first

    assert list(iter_causes(first)) == [second]


def test_print_error_lists_causes_even_when_quiet() -> None:
    console = _console()
    console.set_quiet(True)

    console.print_error(_chained_error())

    lines = console.file.getvalue().splitlines()
    assert lines[0] == "error: Failed to parse configuration file"
    assert lines[1].strip() == "caused by: bad table header"
    assert lines[2].strip() == "caused by: disk unplugged"


def test_quiet_and_verbose_modes() -> None:
    console = _console()

    console.log("hidden")
    console.set_verbose(True)
    console.log("shown")
    console.set_quiet(True)
    console.print("suppressed")

    output = console.file.getvalue()
    assert "hidden" not in output
    assert "shown" in output
    assert "suppressed" not in output


def test_no_color_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KODO_NO_COLOR", "1")

    assert Console(file=io.StringIO()).no_color is True


def test_raw_terminal_requires_a_tty() -> None:
    with pytest.raises(TerminalError):
        with raw_terminal(io.StringIO()):
            pass


@pytest.mark.skipif(not hasattr(os, "openpty"), reason="needs a pseudo-terminal")
def test_raw_terminal_restores_settings_when_the_block_raises() -> None:
    termios = pytest.importorskip("termios")
    master, slave = os.openpty()
    try:
        with os.fdopen(slave) as stream:
            before = termios.tcgetattr(slave)

            with pytest.raises(RuntimeError):
                with raw_terminal(stream):
                    inside = termios.tcgetattr(slave)
                    assert not inside[3] & termios.ECHO
                    assert not inside[3] & termios.ICANON
                    raise RuntimeError("dashboard crashed")

            assert termios.tcgetattr(slave) == before
    finally:
        os.close(master)
