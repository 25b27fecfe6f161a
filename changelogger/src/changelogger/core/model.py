"""Document model for Keep a Changelog files."""

from __future__ import annotations

from datetime import date as _date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from changelogger.core.conventions import (
    DATE_RE,
    DEFAULT_TITLE,
    INLINE_REFERENCE_RE,
    PREAMBLE_FORMAT,
    PREAMBLE_INTRO,
    PREAMBLE_SEMVER,
    UNRELEASED,
    Category,
    Service,
    is_semver,
)


class UnreleasedNotFoundError(LookupError):
    """Raised when a release is requested but no Unreleased section exists."""


class VersionConflictError(ValueError):
    """Raised when a version label would appear twice in a changelog."""


def normalize_message(message: str) -> str:
    """Capitalize a change message and terminate it with exactly one period.

    A message must fit on one bullet line and must not carry ``[#N]`` issue
    markers; use :func:`split_references` to move those into references.
    """
    text = message.strip()
    if not text:
        raise ValueError("Item message must not be empty.")
    if "\n" in text or "\r" in text:
        raise ValueError("Item message must be a single line.")
    if INLINE_REFERENCE_RE.search(text):
        raise ValueError(f"Item message contains an inline issue marker: {text!r}")
    text = text[:1].upper() + text[1:]
    return text.rstrip(".") + "."


def split_references(text: str) -> Tuple[str, List[int]]:
    """Remove every ``[#N]`` marker from ``text`` and return the rest with the ids.

    Removal repeats until no marker is left, so ``x [[#1]#2]`` yields ``x``
    and ``[1, 2]``.
    """
    references: List[int] = []
    found = INLINE_REFERENCE_RE.findall(text)
    while found:
        references.extend(int(reference) for reference in found)
        text = INLINE_REFERENCE_RE.sub("", text)
        found = INLINE_REFERENCE_RE.findall(text)
    return text.strip(), references


def _normalize_url(value: str) -> str:
    return value.strip().rstrip("/")


class Item(BaseModel):
    """A single bullet-point change entry with optional issue references."""

    message: str = Field(..., description="Change description, kept in its rendered form.")
    references: List[int] = Field(
        default_factory=list, description="Issue ids cited by the entry, in insertion order."
    )

    model_config = {"validate_assignment": True}

    @field_validator("message")
    @classmethod
    def _normalize_message(cls, value: str) -> str:
        return normalize_message(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.message == other.message and sorted(self.references) == sorted(other.references)

    def add_reference(self, reference: int) -> None:
        """Attach an issue id to the entry."""
        self.references.append(int(reference))

    def render(self) -> str:
        """Return the bullet text without its leading dash."""
        references = "".join(f" [#{reference}]" for reference in sorted(self.references))
        return f"{self.message}{references}"

    def __str__(self) -> str:
        return self.render()


class Version(BaseModel):
    """One version section: label, release date, compare link and categorized items."""

    label: str = Field(..., description="Semantic version or 'Unreleased'.")
    date: Optional[str] = Field(default=None, description="Release date formatted as YYYY-MM-DD.")
    previous: Optional[str] = Field(default=None, description="Label of the preceding release.")
    categories: Dict[Category, List[Item]] = Field(
        default_factory=dict, description="Change items grouped by category."
    )
    base_url: str = Field(default="", description="Repository URL used to build the compare link.")
    service: Service = Field(default=Service.GITHUB, description="Hosting service link convention.")

    model_config = {"validate_assignment": True}

    @field_validator("label")
    @classmethod
    def _validate_label(cls, value: str) -> str:
        if value != UNRELEASED and not is_semver(value):
            msg = f"Version label '{value}' is neither a semantic version nor '{UNRELEASED}'."
            raise ValueError(msg)
        return value

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not DATE_RE.match(value):
            msg = f"Release date '{value}' must be formatted as YYYY-MM-DD."
            raise ValueError(msg)
        try:
            _date.fromisoformat(value)
        except ValueError as exc:
            raise ValueError(f"Release date '{value}' is not a calendar date.") from exc
        return value

    @field_validator("previous")
    @classmethod
    def _validate_previous(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_semver(value):
            msg = f"Previous version '{value}' is not a semantic version."
            raise ValueError(msg)
        return value

    @field_validator("categories")
    @classmethod
    def _drop_empty_categories(cls, value: Dict[Category, List[Item]]) -> Dict[Category, List[Item]]:
        return {category: items for category, items in value.items() if items}

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        return _normalize_url(value)

    @property
    def is_unreleased(self) -> bool:
        """Return True for the pending 'Unreleased' section."""
        return self.label == UNRELEASED

    def items(self, category: Category | str) -> List[Item]:
        """Return a copy of the items filed under ``category``."""
        return list(self.categories.get(Category(category), []))

    def add_item(self, category: Category | str, item: Item) -> None:
        """Append an item to a category, creating the category if needed."""
        self.categories.setdefault(Category(category), []).append(item)

    def set_items(self, category: Category | str, items: Iterable[Item]) -> None:
        """Replace the items of a category; an empty iterable removes it."""
        key = Category(category)
        values = list(items)
        if values:
            self.categories[key] = values
        else:
            self.categories.pop(key, None)

    def header(self) -> str:
        """Return the ``## [label] - date`` heading line."""
        if self.date:
            return f"## [{self.label}] - {self.date}"
        return f"## [{self.label}]"

    def compare_link(self) -> str:
        """Return the reference line pointing at this version's diff or tag page."""
        if self.previous:
            target = f"{self.base_url}/compare/{self.previous}...{self.label}"
        elif not self.is_unreleased:
            target = f"{self.base_url}{self.service.tag_path}{self.label}"
        else:
            target = self.base_url
        return f"[{self.label}]: {target}".rstrip()

    def render_lines(self) -> List[str]:
        lines = [self.header(), self.compare_link(), ""]
        for category in Category:
            items = self.categories.get(category)
            if not items:
                continue
            lines.append(f"### {category.value}")
            lines.extend(f"- {item.render()}" for item in items)
            lines.append("")
        return lines

    def render(self) -> str:
        """Render the section exactly as it appears inside a changelog."""
        return "\n".join(self.render_lines()) + "\n"

    def __str__(self) -> str:
        return self.render()


class Changelog(BaseModel):
    """Whole changelog document: title, ordered versions and issue references."""

    title: str = Field(default=DEFAULT_TITLE, description="Document title without the leading '#'.")
    versions: List[Version] = Field(default_factory=list, description="Version sections in file order.")
    references: Dict[int, str] = Field(default_factory=dict, description="Issue id to issue URL.")
    service: Service = Field(default=Service.GITHUB, description="Hosting service link convention.")
    base_url: str = Field(default="", description="Repository URL shared by all links.")

    model_config = {"validate_assignment": True}

    @field_validator("title")
    @classmethod
    def _validate_title(cls, value: str) -> str:
        title = value.strip()
        if not title:
            raise ValueError("Changelog title must not be empty.")
        return title

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        return _normalize_url(value)

    @model_validator(mode="after")
    def _validate_unreleased(self) -> "Changelog":
        pending = sum(1 for version in self.versions if version.is_unreleased)
        if pending > 1:
            msg = f"A changelog may contain only one '{UNRELEASED}' section, found {pending}."
            raise ValueError(msg)
        return self

    @classmethod
    def default(cls, base_url: str = "", service: Service = Service.GITHUB) -> "Changelog":
        """Create the starting document: title, preamble and an empty Unreleased section."""
        changelog = cls(title=DEFAULT_TITLE, service=service, base_url=base_url)
        changelog.find_or_create_unreleased()
        return changelog

    def _check_unreleased_slot(self, version: Version) -> None:
        if version.is_unreleased and self.find_version(UNRELEASED) is not None:
            raise VersionConflictError(f"The changelog already has an '{UNRELEASED}' section.")

    def add_version(self, version: Version) -> None:
        """Append a version after the existing ones."""
        self._check_unreleased_slot(version)
        self.versions.append(version)

    def prepend_version(self, version: Version) -> None:
        """Insert a version before all others, e.g. a new Unreleased section."""
        self._check_unreleased_slot(version)
        self.versions.insert(0, version)

    def find_version(self, label: str) -> Optional[Version]:
        """Return the version carrying ``label`` if present."""
        for version in self.versions:
            if version.label == label:
                return version
        return None

    def find_latest(self) -> Optional[Version]:
        """Return the first released version in document order."""
        for version in self.versions:
            if not version.is_unreleased:
                return version
        return None

    def find_or_create_unreleased(self, base_url: Optional[str] = None) -> Version:
        """Return the Unreleased section, creating it at the top when missing.

        A newly created section points its compare link at the latest release,
        or at the bare repository URL when nothing has been released yet.
        """
        for version in self.versions:
            if version.is_unreleased:
                return version

        latest = self.find_latest()
        version = Version(
            label=UNRELEASED,
            previous=latest.label if latest is not None else None,
            base_url=self.base_url if base_url is None else base_url,
            service=self.service,
        )
        self.prepend_version(version)
        return version

    def release(self, label: str, date: Optional[str] = None) -> Version:
        """Turn the Unreleased section into a dated release named ``label``."""
        unreleased = self.find_version(UNRELEASED)
        if unreleased is None:
            raise UnreleasedNotFoundError(f"No '{UNRELEASED}' section to release.")
        if self.find_version(label) is not None:
            raise VersionConflictError(f"Version '{label}' already exists in the changelog.")
        stamped = Version(label=label, date=date or _date.today().isoformat())
        unreleased.label = stamped.label
        unreleased.date = stamped.date
        return unreleased

    def set_references(self, references: Mapping[int, str]) -> None:
        """Replace the issue reference block."""
        self.references = {int(key): str(value) for key, value in references.items()}

    def add_reference(self, reference_id: int, url: str) -> None:
        """Add or overwrite a single issue reference."""
        self.references[int(reference_id)] = url

    def issue_url(self, reference_id: int) -> str:
        """Return the conventional issue URL for ``reference_id``."""
        return f"{self.base_url}/issues/{int(reference_id)}"

    def render_lines(self) -> List[str]:
        lines = [f"# {self.title}", "", PREAMBLE_INTRO, "", PREAMBLE_FORMAT, PREAMBLE_SEMVER, "", ""]
        for version in self.versions:
            lines.extend(version.render_lines())
        for reference_id in sorted(self.references, reverse=True):
            lines.append(f"[#{reference_id}]: {self.references[reference_id]}")
        return lines

    def render(self) -> str:
        """Render the full document in the canonical layout accepted by the parser."""
        return "\n".join(self.render_lines()) + "\n"

    def __str__(self) -> str:
        return self.render()


def default_text(base_url: str = "", service: Service = Service.GITHUB) -> str:
    """Return the skeleton document used when a project has no changelog yet."""
    return Changelog.default(base_url, service).render()


__all__ = [
    "Changelog",
    "Item",
    "UnreleasedNotFoundError",
    "Version",
    "VersionConflictError",
    "default_text",
    "normalize_message",
    "split_references",
]
