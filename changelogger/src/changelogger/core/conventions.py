"""Fixed vocabulary of the Keep a Changelog document convention."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Tuple

UNRELEASED = "Unreleased"

SEMVER_PATTERN = r"\d+\.\d+\.\d+(?:-[\w.]+)?"
DATE_PATTERN = r"\d{4}-\d{2}-\d{2}"

SEMVER_RE = re.compile(rf"^{SEMVER_PATTERN}$")
DATE_RE = re.compile(rf"^{DATE_PATTERN}$")
# Issue marker such as " [#12]" written on an item line.
INLINE_REFERENCE_RE = re.compile(r"\s*\[#(\d+)\]")

PREAMBLE_INTRO = "All notable changes to this project will be documented in this file."
PREAMBLE_FORMAT = "The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),"
PREAMBLE_SEMVER = "and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html)."

DEFAULT_TITLE = "Changelog"


class Service(str, Enum):
    """Git hosting services whose link conventions are understood."""

    GITHUB = "GitHub"
    GITLAB = "GitLab"

    @property
    def tag_path(self) -> str:
        """Path segment placed between the base URL and a tag name."""
        if self is Service.GITLAB:
            return "/tags/"
        return "/releases/tag/"

    @classmethod
    def detect(cls, url: str) -> "Service":
        """Guess the service from a repository URL, defaulting to GitHub."""
        return cls.GITLAB if "gitlab" in url.lower() else cls.GITHUB


class Category(str, Enum):
    """Change categories, declared in rendering order."""

    ADDED = "Added"
    CHANGED = "Changed"
    DEPRECATED = "Deprecated"
    FIXED = "Fixed"
    REMOVED = "Removed"
    SECURITY = "Security"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Category"]:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


ALL_CATEGORIES: Tuple[Category, ...] = tuple(Category)


def is_semver(label: str) -> bool:
    """Return True if ``label`` is a ``MAJOR.MINOR.PATCH[-prerelease]`` string."""
    return bool(SEMVER_RE.match(label))


__all__ = [
    "ALL_CATEGORIES",
    "Category",
    "DATE_PATTERN",
    "DATE_RE",
    "DEFAULT_TITLE",
    "INLINE_REFERENCE_RE",
    "PREAMBLE_FORMAT",
    "PREAMBLE_INTRO",
    "PREAMBLE_SEMVER",
    "SEMVER_PATTERN",
    "SEMVER_RE",
    "Service",
    "UNRELEASED",
    "is_semver",
]
