"""Command line interface for kodo."""

from .main import app

__all__ = ["app"]
