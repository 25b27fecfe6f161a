"""Core document model for Changelogger."""

from .conventions import ALL_CATEGORIES, UNRELEASED, Category, Service
from .model import (
    Changelog,
    Item,
    UnreleasedNotFoundError,
    Version,
    VersionConflictError,
    default_text,
)

__all__ = [
    "ALL_CATEGORIES",
    "Category",
    "Changelog",
    "Item",
    "Service",
    "UNRELEASED",
    "UnreleasedNotFoundError",
    "Version",
    "VersionConflictError",
    "default_text",
]
