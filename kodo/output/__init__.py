"""Output formatters for analysis results."""

from .base import Formatter
from .csv_formatter import CsvFormatter
from .json_formatter import JsonFormatter

__all__ = ["CsvFormatter", "Formatter", "JsonFormatter", "formatter_for"]


def formatter_for(output: str, include_headers: bool = True, pretty: bool = True) -> Formatter:
    """Return the formatter registered for an output name (``json`` or ``csv``)."""

    if output == "json":
        return JsonFormatter(pretty=pretty)
    if output == "csv":
        return CsvFormatter(include_headers=include_headers)
    raise ValueError(f"No formatter for output '{output}'")
