"""Commit statistics for local git repositories."""

__version__ = "0.3.0"
