"""Interactive dashboard application."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from rich.live import Live

from ..console import Console
from ..models import ActivityHistogram
from ..stats import AnalysisResult
from .events import DEFAULT_TICK_RATE, Event, EventHandler, KeyEvent, KeyPress
from .model import Action, Metric, Model, action_from_key, update
from .terminal import raw_terminal
from .ui import render

logger = logging.getLogger(__name__)


class App:
    """Long-lived dashboard state around an analysis result.

    Every input goes through :func:`~kodo.tui.model.update` on a
    :class:`Model` snapshot; the App only stores the outcome.
    """

    def __init__(
        self,
        result: AnalysisResult,
        activity: ActivityHistogram,
        single_metric: bool = False,
    ) -> None:
        self.result = result
        self.activity = activity
        self.apply_model(Model.initial(single_metric, len(result.stats)))

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------
    def to_model(self) -> Model:
        return Model(
            chart_type=self.chart_type,
            should_quit=self.should_quit,
            single_metric=self.single_metric,
            scroll_offset=self.scroll_offset,
            data_len=len(self.result.stats),
        )

    def apply_model(self, model: Model) -> None:
        self.chart_type = model.chart_type
        self.should_quit = model.should_quit
        self.single_metric = model.single_metric
        self.scroll_offset = model.scroll_offset

    def apply_action(self, action: Action) -> None:
        self.apply_model(update(self.to_model(), action))

    def handle_key(self, key: KeyEvent) -> None:
        self.apply_action(action_from_key(key))

    def handle_event(self, event: Event) -> None:
        """Dispatch one event; resizes and ticks only trigger a repaint."""

        if isinstance(event, KeyPress):
            self.handle_key(event.key)
        else:
            self.apply_action(Action.TICK)

    def can_scroll(self) -> bool:
        return self.to_model().can_scroll()

    # ------------------------------------------------------------------
    # Chart data
    # ------------------------------------------------------------------
    @staticmethod
    def all_metrics() -> List[Metric]:
        return list(Metric)

    def values_for_metric(self, metric: Metric) -> List[Tuple[str, int]]:
        """Label/value series for ``metric``; additions and deletions plot net lines."""

        if metric is Metric.COMMITS:
            return [(bucket.label, bucket.commits) for bucket in self.result.stats]
        if metric is Metric.FILES_CHANGED:
            return [(bucket.label, bucket.files_changed) for bucket in self.result.stats]
        return [(bucket.label, bucket.net_lines) for bucket in self.result.stats]

    def additions_deletions_data(self) -> List[Tuple[str, int, int]]:
        return [(bucket.label, bucket.additions, bucket.deletions) for bucket in self.result.stats]

    def weekday_data(self) -> List[Tuple[str, int]]:
        return list(zip(self.activity.weekday_labels(), self.activity.weekday))

    def hourly_data(self) -> List[Tuple[str, int]]:
        return [(str(hour), count) for hour, count in enumerate(self.activity.hourly)]

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(
        self,
        console: Optional[Console] = None,
        tick_rate: float = DEFAULT_TICK_RATE,
        handler_factory: Callable[[float], EventHandler] = EventHandler,
    ) -> None:
        """Run the dashboard until the user quits.

        Raw mode and the alternate screen are released on every exit path.

        Raises:
            TerminalError: If stdin is not an interactive terminal.
        """
        console = console or Console()
        logger.debug("Starting dashboard for %s (%d buckets)", self.result.repository, len(self.result.stats))

        with raw_terminal(), Live(render(self), console=console, screen=True, auto_refresh=False) as live:
            handler = handler_factory(tick_rate)
            try:
                while not self.should_quit:
                    live.update(render(self), refresh=True)
                    self.handle_event(handler.next())
            finally:
                handler.close()


def run_dashboard(
    result: AnalysisResult,
    activity: ActivityHistogram,
    single_metric: bool = False,
    console: Optional[Console] = None,
) -> None:
    App(result, activity, single_metric=single_metric).run(console=console)


__all__ = ["App", "run_dashboard"]
