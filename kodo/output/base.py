"""Formatter interface for analysis results."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..stats import AnalysisResult


class Formatter(ABC):
    """Base class for turning an analysis result into text."""

    @abstractmethod
    def format(self, result: AnalysisResult) -> str:
        """Format the analysis result.

        Args:
            result: Statistics to render

        Returns:
            Rendered text

        Raises:
            OutputError: If the result cannot be rendered
        """
        pass
