"""Parsing of changelog text into the document model."""

from .cursor import LineCursor
from .errors import ErrorKind, ParseError
from .parser import Parser, parse

__all__ = ["ErrorKind", "LineCursor", "ParseError", "Parser", "parse"]
