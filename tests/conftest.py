"""Test fixtures for changelog projects on disk."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

REPO_URL = "https://github.com/acme/widgets"

CHANGELOG_TEXT = textwrap.dedent(
    """\
    # Changelog

    All notable changes to this project will be documented in this file.

    The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),
    and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).


    ## [Unreleased]
    [Unreleased]: https://github.com/acme/widgets/compare/0.2.0...Unreleased

    ### Added
    - Export to CSV. [#21]

    ## [0.2.0] - 2024-02-10
    [0.2.0]: https://github.com/acme/widgets/compare/0.1.0...0.2.0

    ### Fixed
    - Handle empty files. [#17]

    ## [0.1.0] - 2024-01-05
    [0.1.0]: https://github.com/acme/widgets/releases/tag/0.1.0

    ### Added
    - Initial release.

    [#21]: https://github.com/acme/widgets/issues/21
    [#17]: https://github.com/acme/widgets/issues/17
    """
)


def _write_config(root: Path, body: str) -> None:
    (root / ".changelogger.yml").write_text(textwrap.dedent(body), encoding="utf-8")


@pytest.fixture()
def changelog_text() -> str:
    """Canonical changelog with an Unreleased section and two releases."""
    return CHANGELOG_TEXT


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """Project root holding a configuration file and the canonical changelog."""
    root = tmp_path / "widgets"
    root.mkdir()
    _write_config(root, f"url: {REPO_URL}\n")
    (root / "CHANGELOG.md").write_text(CHANGELOG_TEXT, encoding="utf-8")
    return root


@pytest.fixture()
def empty_project_dir(tmp_path: Path) -> Path:
    """Configured project root without a changelog yet."""
    root = tmp_path / "fresh"
    root.mkdir()
    _write_config(root, f"url: {REPO_URL}\n")
    return root
