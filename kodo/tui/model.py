"""Dashboard state and its transition function.

The dashboard keeps its long-lived state on :class:`~kodo.tui.app.App`; every
input is turned into an :class:`Action` and applied to a :class:`Model`
snapshot by :func:`update`, which has no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable

from .events import KeyEvent


class _Cyclic(Enum):
    """Enum whose members form a fixed cycle in declaration order."""

    def _step(self, offset: int):
        members = list(type(self))
        return members[(members.index(self) + offset) % len(members)]

    def next(self):
        return self._step(1)

    def prev(self):
        return self._step(-1)


class ChartType(_Cyclic):
    """Chart shown in single-chart mode."""

    COMMITS = "Commits"
    FILES_CHANGED = "Files Changed"
    ADD_DEL = "Add/Del"
    WEEKDAY = "Weekday"
    HOUR = "Hour"

    @property
    def display_name(self) -> str:
        return self.value


class Metric(_Cyclic):
    """Per-period series plotted in the split dashboard."""

    COMMITS = "Commits"
    ADDITIONS_AND_DELETIONS = "Additions / Deletions"
    FILES_CHANGED = "Files Changed"

    @property
    def display_name(self) -> str:
        return self.value


class Action(Enum):
    QUIT = "quit"
    NEXT_CHART = "next_chart"
    PREV_CHART = "prev_chart"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    TOGGLE_MODE = "toggle_mode"
    TICK = "tick"


# Plain (unmodified) key bindings; Ctrl+C is handled separately.
KEY_BINDINGS: Dict[str, Action] = {
    "q": Action.QUIT,
    "esc": Action.QUIT,
    "tab": Action.NEXT_CHART,
    "right": Action.NEXT_CHART,
    "l": Action.NEXT_CHART,
    "backtab": Action.PREV_CHART,
    "left": Action.PREV_CHART,
    "h": Action.PREV_CHART,
    "up": Action.SCROLL_UP,
    "k": Action.SCROLL_UP,
    "down": Action.SCROLL_DOWN,
    "j": Action.SCROLL_DOWN,
    "m": Action.TOGGLE_MODE,
}


def action_from_key(key: KeyEvent) -> Action:
    """Map a key press to the action it triggers; unbound keys are ticks."""

    if key.ctrl:
        return Action.QUIT if key.code == "c" else Action.TICK
    return KEY_BINDINGS.get(key.code, Action.TICK)


@dataclass(frozen=True, slots=True)
class Model:
    """Snapshot of the dashboard state.

    ``data_len`` is the number of buckets currently on screen; it bounds
    scrolling and is never changed by :func:`update`.
    """

    chart_type: ChartType = ChartType.COMMITS
    should_quit: bool = False
    single_metric: bool = False
    scroll_offset: int = 0
    data_len: int = 0

    @classmethod
    def initial(cls, single_metric: bool, data_len: int = 0) -> "Model":
        return cls(single_metric=single_metric, data_len=data_len)

    def can_scroll(self) -> bool:
        """Only the split dashboard and the additions/deletions chart scroll."""
        return not self.single_metric or self.chart_type is ChartType.ADD_DEL

    @property
    def max_scroll_offset(self) -> int:
        return max(self.data_len - 1, 0)


def update(model: Model, action: Action) -> Model:
    """Return the state that follows ``model`` after ``action``."""

    if action is Action.QUIT:
        return replace(model, should_quit=True)

    if action is Action.NEXT_CHART:
        if not model.single_metric:
            return model
        return replace(model, chart_type=model.chart_type.next())

    if action is Action.PREV_CHART:
        if not model.single_metric:
            return model
        return replace(model, chart_type=model.chart_type.prev())

    if action is Action.TOGGLE_MODE:
        return replace(model, single_metric=not model.single_metric, scroll_offset=0)

    if action is Action.SCROLL_UP:
        if not model.can_scroll() or model.data_len == 0:
            return model
        return replace(model, scroll_offset=min(model.scroll_offset + 1, model.max_scroll_offset))

    if action is Action.SCROLL_DOWN:
        if not model.can_scroll():
            return model
        return replace(model, scroll_offset=max(model.scroll_offset - 1, 0))

    return model


def apply_actions(model: Model, actions: Iterable[Action], stop_on_quit: bool = True) -> Model:
    """Fold a sequence of actions over ``model``."""

    result = model
    for action in actions:
        result = update(result, action)
        if stop_on_quit and result.should_quit:
            break
    return result
