"""Interactive terminal dashboard."""

from .app import App, run_dashboard
from .events import EventHandler, KeyEvent, KeyPress, Resize, Tick, decode_keys
from .model import Action, ChartType, Metric, Model, action_from_key, apply_actions, update

__all__ = [
    "Action",
    "App",
    "ChartType",
    "EventHandler",
    "KeyEvent",
    "KeyPress",
    "Metric",
    "Model",
    "Resize",
    "Tick",
    "action_from_key",
    "apply_actions",
    "decode_keys",
    "run_dashboard",
    "update",
]
