"""CSV output formatter."""

from __future__ import annotations

import csv
import io

from ..stats import AnalysisResult
from .base import Formatter

HEADER = ("date", "commits", "additions", "deletions", "net_lines", "files_changed")


class CsvFormatter(Formatter):
    """One row per bucket followed by a ``TOTAL`` row."""

    def __init__(self, include_headers: bool = True) -> None:
        self.include_headers = include_headers

    @classmethod
    def without_headers(cls) -> "CsvFormatter":
        return cls(include_headers=False)

    def format(self, result: AnalysisResult) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        if self.include_headers:
            writer.writerow(HEADER)

        for stat in result.stats:
            writer.writerow(
                (
                    stat.date.isoformat(),
                    stat.commits,
                    stat.additions,
                    stat.deletions,
                    stat.net_lines,
                    stat.files_changed,
                )
            )

        total = result.total
        writer.writerow(
            ("TOTAL", total.commits, total.additions, total.deletions, total.net_lines, total.files_changed)
        )
        return buffer.getvalue()
