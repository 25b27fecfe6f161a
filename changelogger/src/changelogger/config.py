"""Project configuration read from ``.changelogger.yml``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from changelogger.core.conventions import ALL_CATEGORIES, Category, Service
from changelogger.utils.io import load_yaml

LOG = logging.getLogger(__name__)

CONFIG_FILENAME = ".changelogger.yml"


class ChangeloggerConfig(BaseModel):
    """Per-project settings; every field may be overridden on the command line."""

    path: Path = Field(default=Path("CHANGELOG.md"), description="Changelog file, relative to the project root.")
    url: Optional[str] = Field(default=None, description="Repository URL; discovered from git when omitted.")
    service: Optional[Service] = Field(default=None, description="Hosting service; guessed from the URL when omitted.")
    categories: List[Category] = Field(
        default_factory=lambda: list(ALL_CATEGORIES),
        description="Category headings recognized while parsing, in scan order.",
    )

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "examples": [
                {
                    "path": "CHANGELOG.md",
                    "url": "https://github.com/acme/widgets",
                    "service": "GitHub",
                    "categories": ["Added", "Changed", "Fixed"],
                }
            ]
        },
    }

    @field_validator("url")
    @classmethod
    def _strip_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip().rstrip("/") or None

    @field_validator("categories")
    @classmethod
    def _require_categories(cls, value: List[Category]) -> List[Category]:
        if not value:
            raise ValueError("At least one category must be configured.")
        return list(dict.fromkeys(value))


def load_config(root: Path) -> ChangeloggerConfig:
    """Load ``.changelogger.yml`` from ``root``, falling back to defaults."""
    config_path = Path(root) / CONFIG_FILENAME
    if not config_path.exists():
        LOG.debug("No %s found in %s; using defaults.", CONFIG_FILENAME, root)
        return ChangeloggerConfig()
    LOG.debug("Loading configuration from %s", config_path)
    return ChangeloggerConfig.model_validate(load_yaml(config_path))


__all__ = ["CONFIG_FILENAME", "ChangeloggerConfig", "load_config"]
