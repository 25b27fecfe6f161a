"""Command line interface for Changelogger."""

from .main import app

__all__ = ["app"]
