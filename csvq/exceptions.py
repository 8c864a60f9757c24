"""Exceptions raised by the csvq library."""

from __future__ import annotations


class CsvqError(Exception):
    """Base class for csvq errors."""


class WhereParseError(CsvqError):
    """A where predicate is syntactically invalid.

    The predicate is rejected as a whole; callers are expected to continue
    without filtering rather than abort.
    """

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"
