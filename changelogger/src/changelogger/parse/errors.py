"""Failure type raised by the changelog parser."""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence


class ErrorKind(str, Enum):
    """Broad classes of grammar violations."""

    STRUCTURAL = "structural"
    GRAMMAR = "grammar"
    SEMANTIC_MISMATCH = "semantic_mismatch"


class ParseError(Exception):
    """Raised when changelog text does not follow the expected grammar.

    ``context`` holds the most recently read lines, each prefixed with its
    1-based line number. The line at which parsing failed is flagged with an
    arrow (`` -> 12: ...``); when input remained, the line after it is
    included as well.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.GRAMMAR,
        context: Sequence[str] = (),
        line_number: int = 0,
    ) -> None:
        self.message = message
        self.kind = kind
        self.context: List[str] = list(context)
        self.line_number = line_number
        super().__init__(self._format())

    @property
    def excerpt(self) -> str:
        """Return the context lines joined into a printable block."""
        return "\n".join(self.context)

    def _format(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message}\n\n{self.excerpt}"


__all__ = ["ErrorKind", "ParseError"]
