"""JSON output formatter."""

from __future__ import annotations

import json

from ..exceptions import OutputError
from ..stats import AnalysisResult
from .base import Formatter


class JsonFormatter(Formatter):
    """Render results as a JSON document, pretty-printed by default."""

    def __init__(self, pretty: bool = True) -> None:
        self.pretty = pretty

    @classmethod
    def compact(cls) -> "JsonFormatter":
        return cls(pretty=False)

    def format(self, result: AnalysisResult) -> str:
        payload = result.to_dict()
        try:
            if self.pretty:
                return json.dumps(payload, indent=2, ensure_ascii=False)
            return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise OutputError("Failed to serialise analysis result as JSON") from exc
