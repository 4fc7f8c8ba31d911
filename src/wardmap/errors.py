"""
Exception taxonomy for wardmap.

Parsing never raises these to the caller: field and construct failures are
turned into ParseError diagnostics. Mutators raise them before any text is
touched, so a caught error always means the input text is unchanged.
"""

from __future__ import annotations


class MapTextError(Exception):
    """Base class for errors raised by map text mutators."""


class InvalidInputError(MapTextError, ValueError):
    """Arguments failed validation (empty names, bad bounds, ...)."""


class TargetNotFoundError(MapTextError, LookupError):
    """No line in the map text matches the requested identifier."""

    def __init__(self, message: str, identifier: str | None = None):
        super().__init__(message)
        self.identifier = identifier


class LineOutOfRangeError(InvalidInputError, IndexError):
    """A 1-based line number points outside the map text."""

    def __init__(self, line: int, line_count: int):
        super().__init__(f"Line {line} is out of range (map has {line_count} lines)")
        self.line = line
        self.line_count = line_count


class FieldError(ValueError):
    """
    A field extractor could not read its field.

    Raised inside the line-scan runner only. The extractor applies its
    fallback value before raising so the element stays usable.
    """
