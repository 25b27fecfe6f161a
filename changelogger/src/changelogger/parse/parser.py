"""Line-oriented parser for Keep a Changelog documents."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional, Set

from pydantic import ValidationError

from changelogger.core.conventions import (
    ALL_CATEGORIES,
    DATE_PATTERN,
    PREAMBLE_FORMAT,
    PREAMBLE_INTRO,
    PREAMBLE_SEMVER,
    SEMVER_PATTERN,
    UNRELEASED,
    Category,
    Service,
)
from changelogger.core.model import Changelog, Item, Version, split_references
from changelogger.parse.cursor import LineCursor
from changelogger.parse.errors import ErrorKind, ParseError

LOG = logging.getLogger(__name__)

TITLE_RE = re.compile(r"^# (?P<title>.+)$")
VERSION_HEADER_RE = re.compile(
    rf"^## \[(?P<label>{SEMVER_PATTERN}|{UNRELEASED})\](?: - (?P<date>{DATE_PATTERN}))?$"
)
BULLET_RE = re.compile(r"^- (?P<text>.+)$")
# Any "[label]: target" line, used to tell malformed links from mismatched ones.
LINK_LINE_RE = re.compile(r"^\[[^\]]+\]:(?:\s+\S+)?$")


class Parser:
    """Build a :class:`Changelog` from document text, failing on the first violation."""

    def __init__(
        self,
        text: str,
        base_url: str = "",
        service: Service | str = Service.GITHUB,
        categories: Optional[Iterable[Category | str]] = None,
    ) -> None:
        """Prepare a parser for ``text`` whose links are rooted at ``base_url``."""
        self._text = text
        self._base_url = base_url.strip().rstrip("/")
        self._service = Service(service)
        selected = ALL_CATEGORIES if categories is None else categories
        self._categories = tuple(Category(category) for category in selected)
        self._cursor = LineCursor(text)

    def parse(self) -> Changelog:
        """Parse the whole document."""
        self._cursor = LineCursor(self._text)
        changelog = self._parse_title()
        self._parse_preamble()

        while VERSION_HEADER_RE.match(self._cursor.current()):
            changelog.add_version(self._parse_version(changelog))

        changelog.set_references(self._parse_references())
        self._skip_blank_lines()

        if not self._cursor.exhausted:
            self._cursor.next()
            raise self._error("Unexpected content", ErrorKind.GRAMMAR)

        LOG.debug(
            "Parsed changelog '%s': %d versions, %d references",
            changelog.title,
            len(changelog.versions),
            len(changelog.references),
        )
        return changelog

    def _error(self, message: str, kind: ErrorKind) -> ParseError:
        return self._cursor.error(message, kind)

    def _parse_title(self) -> Changelog:
        match = TITLE_RE.match(self._cursor.next())
        if not match:
            raise self._error("Expected a title", ErrorKind.STRUCTURAL)
        return Changelog(title=match.group("title"), service=self._service, base_url=self._base_url)

    def _parse_preamble(self) -> None:
        self._expect_blank_line()
        self._expect_text(PREAMBLE_INTRO)
        self._expect_blank_line()
        self._expect_text(PREAMBLE_FORMAT)
        self._expect_text(PREAMBLE_SEMVER)
        self._skip_blank_lines()

    def _parse_version(self, changelog: Changelog) -> Version:
        match = VERSION_HEADER_RE.match(self._cursor.next())
        if not match:
            raise self._error("Expected version", ErrorKind.GRAMMAR)
        label = match.group("label")
        if label == UNRELEASED and changelog.find_version(UNRELEASED) is not None:
            raise self._error(f"Duplicate '{UNRELEASED}' section", ErrorKind.STRUCTURAL)

        try:
            version = Version(
                label=label,
                date=match.group("date"),
                base_url=self._base_url,
                service=self._service,
            )
        except ValidationError as exc:
            raise self._error(f"Invalid release date '{match.group('date')}'", ErrorKind.GRAMMAR) from exc
        version.previous = self._parse_compare_link(label)
        self._skip_blank_lines()
        self._parse_categories(version)
        LOG.debug("Parsed version %s (%d categories)", label, len(version.categories))
        return version

    def _parse_compare_link(self, label: str) -> Optional[str]:
        line = self._cursor.next()
        if not line.startswith("["):
            raise self._error("Expected link to compare page with previous version", ErrorKind.GRAMMAR)

        current = re.escape(label)
        url = re.escape(self._base_url)
        compare = re.match(
            rf"^\[{current}\]: {url}/compare/(?P<previous>{SEMVER_PATTERN})\.\.\.{current}$",
            line,
        )
        if compare:
            return compare.group("previous")

        if label == UNRELEASED:
            expected = f"[{label}]: {self._base_url}".rstrip()
        else:
            expected = f"[{label}]: {self._base_url}{self._service.tag_path}{label}"
        if line == expected:
            return None

        kind = ErrorKind.SEMANTIC_MISMATCH if LINK_LINE_RE.match(line) else ErrorKind.GRAMMAR
        raise self._error("Error in compare link syntax", kind)

    def _parse_categories(self, version: Version) -> None:
        seen: Set[Category] = set()
        while True:
            heading = self._cursor.current()
            category = next(
                (
                    candidate
                    for candidate in self._categories
                    if candidate not in seen and heading == f"### {candidate.value}"
                ),
                None,
            )
            if category is None:
                return
            self._cursor.next()
            seen.add(category)
            version.set_items(category, self._parse_items())
            self._skip_blank_lines()

    def _parse_items(self) -> List[Item]:
        items: List[Item] = []
        while True:
            match = BULLET_RE.match(self._cursor.current())
            if not match:
                return items
            self._cursor.next()
            items.append(self._parse_item(match.group("text")))

    def _parse_item(self, text: str) -> Item:
        message, references = split_references(text)
        if not message:
            raise self._error("Expected item message", ErrorKind.GRAMMAR)
        return Item(message=message, references=references)

    def _parse_references(self) -> Dict[int, str]:
        references: Dict[int, str] = {}
        pattern = re.compile(
            rf"^\[#(?P<id>\d+)\]: (?P<url>{re.escape(self._base_url)}/issues/(?P<issue>\d+))$"
        )
        while self._cursor.current().startswith("["):
            line = self._cursor.next()
            match = pattern.match(line)
            if match and int(match.group("id")) == int(match.group("issue")):
                references[int(match.group("id"))] = match.group("url")
                continue
            kind = ErrorKind.SEMANTIC_MISMATCH if LINK_LINE_RE.match(line) else ErrorKind.GRAMMAR
            raise self._error("Error parsing reference", kind)
        return references

    def _expect_blank_line(self) -> None:
        if self._cursor.next():
            raise self._error("Expected a blank line", ErrorKind.STRUCTURAL)
        self._skip_blank_lines()

    def _expect_text(self, text: str) -> None:
        if self._cursor.next() != text:
            raise self._error(f"Expected preamble line '{text}'", ErrorKind.STRUCTURAL)

    def _skip_blank_lines(self) -> None:
        while not self._cursor.exhausted and not self._cursor.current():
            self._cursor.next()


def parse(
    text: str,
    base_url: str = "",
    service: Service | str = Service.GITHUB,
    categories: Optional[Iterable[Category | str]] = None,
) -> Changelog:
    """Parse changelog ``text`` into a :class:`Changelog`.

    Args:
        text: Full document contents.
        base_url: Repository URL every compare and issue link must start with.
        service: Hosting service whose tag link convention applies.
        categories: Category headings to recognize, in scan order. Defaults
            to every :class:`Category`.

    Raises:
        ParseError: On the first line that breaks the grammar.
    """
    return Parser(text, base_url, service, categories).parse()


__all__ = ["Parser", "parse"]
