"""Screen layout for the dashboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.align import Align
from rich.console import RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from .charts import BarChart, ColumnChart, DivergingBarChart
from .model import ChartType, Metric

if TYPE_CHECKING:
    from .app import App

HEADER_SIZE = 3
FOOTER_SIZE = 4


def format_date_range(start: str, end: str) -> str:
    return f"{start} → {end}"


def render(app: "App") -> Layout:
    """Build the full-screen layout for the current dashboard state."""

    layout = Layout(name="root")
    layout.split_column(
        Layout(_header(app), name="header", size=HEADER_SIZE),
        Layout(name="body", minimum_size=10),
        Layout(_footer(app), name="footer", size=FOOTER_SIZE),
    )
    if app.single_metric:
        layout["body"].update(_single_chart(app))
    else:
        _split_charts(layout["body"], app)
    return layout


def _header(app: "App") -> Panel:
    result = app.result
    title = Text(
        f"{result.repository} | {result.period} | "
        + format_date_range(result.start.isoformat(), result.end.isoformat()),
        style="title",
    )
    return Panel(Align.center(title), border_style="frame")


def _footer(app: "App") -> Panel:
    mode = "Single" if app.single_metric else "Split"
    total = app.result.total

    help_line = Text(justify="center")
    help_line.append(f"[m] Mode: {mode}", style="accent")
    if app.single_metric:
        help_line.append(f" | [tab/h/l] Chart: {app.chart_type.display_name}")
    if app.can_scroll():
        help_line.append(" | [j/k] Scroll")
    help_line.append(" | [q] Quit")

    summary = Text(
        f"Total: {total.commits} commits | +{total.additions} -{total.deletions} | "
        f"{total.files_changed} files",
        style="muted",
        justify="center",
    )
    return Panel(Text("\n", justify="center").join([help_line, summary]), border_style="divider")


def _chart_panel(app: "App", chart_type: ChartType) -> Panel:
    renderable: RenderableType
    title = chart_type.display_name
    if chart_type is ChartType.COMMITS:
        renderable = ColumnChart(app.values_for_metric(Metric.COMMITS), style="info", offset=app.scroll_offset)
    elif chart_type is ChartType.FILES_CHANGED:
        renderable = ColumnChart(app.values_for_metric(Metric.FILES_CHANGED), style="accent", offset=app.scroll_offset)
    elif chart_type is ChartType.ADD_DEL:
        title = Metric.ADDITIONS_AND_DELETIONS.display_name
        renderable = DivergingBarChart(app.additions_deletions_data(), offset=app.scroll_offset)
    elif chart_type is ChartType.WEEKDAY:
        renderable = BarChart(app.weekday_data(), style="info")
    else:
        renderable = BarChart(app.hourly_data(), style="repo")
    return Panel(renderable, title=f"[title]{title}[/]", border_style="frame")


def _single_chart(app: "App") -> Panel:
    return _chart_panel(app, app.chart_type)


def _split_charts(body: Layout, app: "App") -> None:
    body.split_row(Layout(name="left", ratio=2), Layout(name="right", ratio=1))
    body["left"].split_column(
        Layout(_chart_panel(app, ChartType.COMMITS), name="commits"),
        Layout(_chart_panel(app, ChartType.FILES_CHANGED), name="files"),
    )
    # Hourly chart needs room for 24 rows.
    body["right"].split_column(
        Layout(_chart_panel(app, ChartType.ADD_DEL), name="add_del", ratio=1),
        Layout(_chart_panel(app, ChartType.WEEKDAY), name="weekday", ratio=1),
        Layout(_chart_panel(app, ChartType.HOUR), name="hour", ratio=3),
    )


__all__ = ["format_date_range", "render"]
