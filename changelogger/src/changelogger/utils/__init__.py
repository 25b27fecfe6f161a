"""Utility helpers for Changelogger."""

from .io import (
    default_git_url,
    load_yaml,
    normalize_remote_url,
    read_text,
    write_text,
)

__all__ = [
    "default_git_url",
    "load_yaml",
    "normalize_remote_url",
    "read_text",
    "write_text",
]
