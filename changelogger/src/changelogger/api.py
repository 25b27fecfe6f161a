"""High-level Python API for reading and updating changelog files."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from changelogger.config import load_config
from changelogger.core.conventions import ALL_CATEGORIES, Category, Service
from changelogger.core.model import Changelog, Item, Version, split_references
from changelogger.parse import parse
from changelogger.utils.io import default_git_url, read_text, write_text

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Project:
    """Where a project's changelog lives and which link conventions it follows."""

    path: Path
    base_url: str
    service: Service
    categories: Tuple[Category, ...] = ALL_CATEGORIES


def resolve_project(
    root: Path | str = ".",
    *,
    path: Optional[Path | str] = None,
    base_url: Optional[str] = None,
    service: Optional[Service | str] = None,
) -> Project:
    """Merge explicit arguments, ``.changelogger.yml`` and the git remote into a Project.

    Explicit arguments win over the configuration file. A URL missing from both
    is read from ``git remote get-url origin`` (empty when unavailable) and a
    missing service is guessed from the URL.
    """

    root = Path(root)
    config = load_config(root)

    changelog_path = Path(path) if path is not None else config.path
    if not changelog_path.is_absolute():
        changelog_path = root / changelog_path

    url = base_url if base_url is not None else config.url
    if url is None:
        url = default_git_url(root)
    url = url.strip().rstrip("/")

    if service is not None:
        resolved_service = Service(service)
    elif config.service is not None:
        resolved_service = config.service
    else:
        resolved_service = Service.detect(url)

    return Project(
        path=changelog_path,
        base_url=url,
        service=resolved_service,
        categories=tuple(config.categories),
    )


def loads(
    text: str,
    *,
    base_url: str = "",
    service: Service | str = Service.GITHUB,
    categories: Optional[Iterable[Category | str]] = None,
) -> Changelog:
    """Parse changelog text; see :func:`changelogger.parse.parse`."""

    return parse(text, base_url, service, categories)


def dumps(changelog: Changelog) -> str:
    """Render a changelog to text."""

    return changelog.render()


def load(project: Project) -> Changelog:
    """Read and parse the project's changelog file."""

    text = read_text(project.path)
    changelog = loads(
        text,
        base_url=project.base_url,
        service=project.service,
        categories=project.categories,
    )
    LOG.info("Loaded %s (%d versions)", project.path, len(changelog.versions))
    return changelog


async def load_async(*args, **kwargs) -> Changelog:
    """Asynchronous wrapper around :func:`load` using a worker thread."""

    return await asyncio.to_thread(load, *args, **kwargs)


def dump(changelog: Changelog, path: Path | str) -> Path:
    """Render ``changelog`` and write it to ``path``."""

    target = write_text(Path(path), changelog.render())
    LOG.info("Wrote %s", target)
    return target


def init(project: Project, *, force: bool = False) -> Changelog:
    """Create the skeleton changelog for a project."""

    if project.path.exists() and not force:
        raise FileExistsError(f"Changelog already exists: {project.path}")
    changelog = Changelog.default(project.base_url, project.service)
    dump(changelog, project.path)
    return changelog


def add_entry(
    project: Project,
    category: Category | str,
    message: str,
    references: Iterable[int] = (),
) -> Item:
    """Append an entry to the Unreleased section, creating the section if needed.

    ``[#N]`` markers typed into ``message`` are moved into the references.
    Every cited issue id missing from the reference block gets the
    conventional ``{base_url}/issues/{id}`` link.
    """

    key = Category(category)
    if key not in project.categories:
        raise ValueError(f"Category '{key.value}' is not enabled for this project.")

    changelog = load(project)
    text, inline = split_references(message)
    item = Item(message=text, references=[*inline, *(int(reference) for reference in references)])
    unreleased = changelog.find_or_create_unreleased(project.base_url)
    unreleased.add_item(key, item)
    for reference in item.references:
        if reference not in changelog.references:
            changelog.add_reference(reference, changelog.issue_url(reference))

    dump(changelog, project.path)
    return item


def release(project: Project, label: str, *, date: Optional[str] = None) -> Version:
    """Rename the Unreleased section to ``label`` and stamp it with a release date."""

    changelog = load(project)
    version = changelog.release(label, date)
    dump(changelog, project.path)
    return version


__all__ = [
    "Project",
    "add_entry",
    "dump",
    "dumps",
    "init",
    "load",
    "load_async",
    "loads",
    "release",
    "resolve_project",
]
