"""Line cursor and error context tests."""

from __future__ import annotations

import pytest

from changelogger.parse import ErrorKind, LineCursor, ParseError


def test_cursor_strips_and_counts_lines() -> None:
    cursor = LineCursor("  first  \r\nsecond\n")
    assert cursor.current() == "first"
    assert cursor.next() == "first"
    assert cursor.line_number == 1
    assert cursor.next() == "second"
    assert cursor.next() == ""
    assert cursor.exhausted
    assert cursor.current() == ""


def test_next_past_end_raises_structural_error() -> None:
    cursor = LineCursor("only")
    cursor.next()
    with pytest.raises(ParseError) as excinfo:
        cursor.next()
    assert excinfo.value.kind is ErrorKind.STRUCTURAL
    assert excinfo.value.context == [" -> 1: only"]


def test_error_window_keeps_last_four_lines() -> None:
    cursor = LineCursor("\n".join(f"line {number}" for number in range(1, 9)))
    for _ in range(5):
        cursor.next()

    error = cursor.error("Broken")

    assert error.kind is ErrorKind.GRAMMAR
    assert error.line_number == 5
    assert error.context == [
        "    3: line 3",
        "    4: line 4",
        " -> 5: line 5",
        "    6: line 6",
    ]
    assert str(error) == "Broken\n\n" + error.excerpt


def test_error_before_any_line() -> None:
    error = LineCursor("").error("Empty", ErrorKind.STRUCTURAL)
    assert error.line_number == 0
    assert error.context == ["    1: "]


def test_parse_error_without_context() -> None:
    error = ParseError("Plain failure")
    assert str(error) == "Plain failure"
    assert error.kind is ErrorKind.GRAMMAR
