"""Forward-only line cursor that remembers what it has read."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Tuple

from changelogger.parse.errors import ErrorKind, ParseError

WINDOW_SIZE = 4
MARKER = " -> "
PADDING = "    "


class LineCursor:
    """Hands out the stripped lines of a document one at a time.

    The last ``window`` consumed lines are kept together with their line
    numbers so that errors can show where parsing stopped.
    """

    def __init__(self, text: str, window: int = WINDOW_SIZE) -> None:
        self._lines: Deque[str] = deque(line.strip() for line in text.split("\n"))
        self._history: Deque[Tuple[int, str]] = deque(maxlen=window)
        self._window = window
        self.line_number = 0

    @property
    def exhausted(self) -> bool:
        """Return True once every line has been consumed."""
        return not self._lines

    def current(self) -> str:
        """Return the next unconsumed line without consuming it."""
        if not self._lines:
            return ""
        return self._lines[0]

    def next(self) -> str:
        """Consume and return the next line."""
        if not self._lines:
            raise self.error("Unexpected end of file", ErrorKind.STRUCTURAL)
        line = self._lines.popleft()
        self.line_number += 1
        self._history.append((self.line_number, line))
        return line

    def error(self, message: str, kind: ErrorKind = ErrorKind.GRAMMAR) -> ParseError:
        """Build a ParseError pointing at the most recently consumed line."""
        failed_at = self.line_number
        entries: List[Tuple[int, str, bool]] = [(number, line, False) for number, line in self._history]
        if entries:
            number, line, _ = entries[-1]
            entries[-1] = (number, line, True)
        if self._lines:
            self.next()
            number, line = self._history[-1]
            entries.append((number, line, False))
        context = [
            f"{MARKER if marked else PADDING}{number}: {line}" for number, line, marked in entries[-self._window :]
        ]
        return ParseError(message, kind, context, failed_at)


__all__ = ["LineCursor", "MARKER", "WINDOW_SIZE"]
