"""Rich renderables that paint numeric series in the terminal."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from rich.console import Console, ConsoleOptions, RenderResult
from rich.text import Text

# Eighth-block glyphs, empty to full.
BLOCKS = " ▁▂▃▄▅▆▇█"
FULL_BLOCK = "█"
DEFAULT_HEIGHT = 10


def format_number(value: int) -> str:
    """Compact a count for axis labels: ``2500`` → ``2.5K``."""

    magnitude = abs(value)
    if magnitude >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if magnitude >= 1_000:
        return f"{value / 1_000:.1f}K"
    return str(value)


def visible_window(length: int, capacity: int, offset: int) -> Tuple[int, int]:
    """Slice bounds of the ``capacity`` items ending ``offset`` items before the newest."""

    end = max(length - max(offset, 0), 0)
    start = max(end - max(capacity, 0), 0)
    return start, end


def _bar(length: int, style: str) -> Text:
    return Text(FULL_BLOCK * max(length, 0), style=style)


def _scaled(value: int, peak: int, cells: int) -> int:
    """Cells occupied by ``value`` when ``peak`` fills ``cells``; non-zero values get at least one."""

    if peak <= 0 or value <= 0 or cells <= 0:
        return 0
    return max(1, round(value / peak * cells))


class ColumnChart:
    """Vertical columns built from eighth-block glyphs, newest on the right.

    When the series is wider than the panel the newest points are shown;
    ``offset`` shifts that window towards older points.
    """

    def __init__(
        self,
        points: Sequence[Tuple[str, int]],
        style: str = "info",
        offset: int = 0,
    ) -> None:
        self.points = list(points)
        self.style = style
        self.offset = offset

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        height = options.height or DEFAULT_HEIGHT
        if not self.points:
            yield Text("no data", style="muted")
            return

        rows = max(height - 1, 1)
        slot = max(width // len(self.points), 2)
        capacity = max(width // slot, 1)
        start, end = visible_window(len(self.points), capacity, self.offset)
        window = self.points[start:end]
        bar_width = max(slot - 1, 1)

        values = [value for _, value in window]
        peak = max([abs(v) for v in values] + [1])
        eighths = [_scaled(abs(v), peak, rows * 8) for v in values]

        lines: List[Text] = []
        for row in range(rows - 1, -1, -1):
            line = Text(no_wrap=True, overflow="crop")
            for units, value in zip(eighths, values):
                fill = min(max(units - row * 8, 0), 8)
                style = "deletions" if value < 0 else self.style
                line.append(BLOCKS[fill] * bar_width, style=style)
                line.append(" " * (slot - bar_width))
            lines.append(line)

        lines.append(self._axis(window, width, peak))
        yield Text("\n").join(lines)

    @staticmethod
    def _axis(window: Sequence[Tuple[str, int]], width: int, peak: int) -> Text:
        first, last = window[0][0], window[-1][0]
        middle = f"max {format_number(peak)}"
        axis = Text(no_wrap=True, overflow="crop", style="muted")
        if first == last:
            axis.append(first)
            return axis
        gap = width - len(first) - len(last)
        if gap > len(middle) + 2:
            left = (gap - len(middle)) // 2
            axis.append(first + " " * left + middle + " " * (gap - left - len(middle)) + last)
        else:
            axis.append(first + " " * max(gap, 1) + last)
        return axis


class BarChart:
    """Horizontal bars, one row per labelled bucket (weekdays, hours)."""

    def __init__(self, points: Sequence[Tuple[str, int]], style: str = "accent") -> None:
        self.points = list(points)
        self.style = style

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        height = options.height or len(self.points)
        if not self.points:
            yield Text("no data", style="muted")
            return

        shown = self.points[: max(height, 1)]
        label_width = max(len(label) for label, _ in shown)
        value_width = max(len(format_number(value)) for _, value in shown)
        cells = max(width - label_width - value_width - 2, 1)
        peak = max([value for _, value in shown] + [1])

        lines = []
        for label, value in shown:
            line = Text(no_wrap=True, overflow="crop")
            line.append(label.rjust(label_width), style="label")
            line.append(" ")
            length = _scaled(value, peak, cells)
            line.append_text(_bar(length, self.style))
            line.append(" " * (cells - length + 1))
            line.append(format_number(value).rjust(value_width), style="value")
            lines.append(line)
        yield Text("\n").join(lines)


class DivergingBarChart:
    """Additions to the right of a centre line, deletions to the left.

    One row per bucket, oldest at the top. The rows shown end ``offset``
    buckets before the newest one.
    """

    def __init__(self, points: Sequence[Tuple[str, int, int]], offset: int = 0) -> None:
        self.points = list(points)
        self.offset = offset

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        height = options.height or DEFAULT_HEIGHT
        if not self.points:
            yield Text("no data", style="muted")
            return

        start, end = visible_window(len(self.points), max(height - 1, 1), self.offset)
        window = self.points[start:end]
        label_width = max(len(label) for label, _, _ in window)
        half = max((width - label_width - 2) // 2, 1)
        peak = max([max(a, d) for _, a, d in window] + [1])

        lines = []
        for label, additions, deletions in window:
            line = Text(no_wrap=True, overflow="crop")
            line.append(label.rjust(label_width), style="label")
            line.append(" ")
            left = _scaled(deletions, peak, half)
            right = _scaled(additions, peak, half)
            line.append(" " * (half - left))
            line.append_text(_bar(left, "deletions"))
            line.append("│", style="divider")
            line.append_text(_bar(right, "additions"))
            lines.append(line)

        legend = Text(no_wrap=True, overflow="crop", style="muted")
        legend.append(f"{start + 1}-{end} of {len(self.points)}  ")
        legend.append(f"scale ±{format_number(peak)}")
        lines.append(legend)
        yield Text("\n").join(lines)


__all__ = [
    "BarChart",
    "ColumnChart",
    "DivergingBarChart",
    "format_number",
    "visible_window",
]
