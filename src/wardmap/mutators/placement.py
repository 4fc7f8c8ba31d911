"""
New elements.

Builds the declaration line for an element dropped onto the map at a
position, gives it a name no existing declaration uses, and appends it to
the map text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..errors import InvalidInputError
from ..extractors import escape_name, format_coordinate, format_name, needs_quotes
from ..preprocess import split_lines, strip_comments
from .lines import parse_declaration
from .rename import validate_name

logger = logging.getLogger(__name__)

_BRACKETS = re.compile(r"[\[\]]")

PLACEABLE = ("component", "anchor", "market", "ecosystem", "note")

DEFAULT_NAMES = {
    "component": "New Component",
    "anchor": "New Anchor",
    "market": "New Market",
    "ecosystem": "New Ecosystem",
    "note": "New Note",
}


@dataclass
class Placement:
    name: str
    text: str
    line: int  # 1-based line of the new declaration


def unique_name(base: str, existing, max_attempts: int = 1000) -> str:
    """base, or `base 1`, `base 2`, ... whichever is not taken first."""
    if not isinstance(base, str) or not base.strip():
        raise InvalidInputError("Base name must be a non-empty string")
    base = base.strip()
    taken = set(existing)
    name = base
    for counter in range(1, max_attempts + 1):
        if name not in taken:
            return name
        name = f"{base} {counter}"
    raise InvalidInputError(f"Could not generate a unique name after {max_attempts} attempts")


def declared_names(text: str) -> list[str]:
    names = []
    for line in split_lines(strip_comments(text)):
        declaration = parse_declaration(line)
        if declaration is not None:
            names.append(declaration.name)
    return names


def note_line(text: str, visibility: float, maturity: float) -> str:
    text = text.strip()
    coords = f"[{format_coordinate(visibility)}, {format_coordinate(maturity)}]"
    if needs_quotes(text):
        return f'note "{escape_name(text)}" {coords}'
    return f"note {_BRACKETS.sub('', text)} {coords}"


def element_line(keyword: str, name: str, visibility: float, maturity: float) -> str:
    if keyword == "note":
        return note_line(name, visibility, maturity)
    coords = f"[{format_coordinate(visibility)}, {format_coordinate(maturity)}]"
    return f"{keyword} {format_name(name)} {coords}"


def append_line(text: str, line: str) -> str:
    """Trimmed map text with line added as its last line."""
    if not isinstance(line, str) or not line.strip():
        raise InvalidInputError("New line must be a non-empty string")
    text = (text or "").strip()
    if not text:
        return line.strip()
    return f"{text}\n{line.strip()}"


def _check_coordinate(label: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value != value:
        raise InvalidInputError(f"{label} must be a valid number")
    if not 0.0 <= value <= 1.0:
        raise InvalidInputError(f"{label} must be between 0 and 1")


def place_element(text: str, visibility: float, maturity: float, keyword: str = "component",
                  base_name: str | None = None) -> Placement:
    """
    Add a `keyword Name [visibility, maturity]` line. Components get a name
    that is unique among the declarations already in the text; a note keeps
    its text as given.
    """
    if keyword not in PLACEABLE:
        raise InvalidInputError(f"Cannot place a {keyword!r}; expected one of {', '.join(PLACEABLE)}")
    _check_coordinate("Visibility", visibility)
    _check_coordinate("Maturity", maturity)
    text = text if isinstance(text, str) else ""

    base = base_name if base_name is not None else DEFAULT_NAMES[keyword]
    if keyword == "note":
        if not isinstance(base, str) or not base.strip():
            raise InvalidInputError("Note text must be a non-empty string")
        name = base.strip()
    else:
        base = re.sub(r"\s+", " ", validate_name(base))
        name = unique_name(base, declared_names(text))

    updated = append_line(text, element_line(keyword, name, visibility, maturity))
    line = len(split_lines(updated))
    logger.debug("placed %s %r on line %d", keyword, name, line)
    return Placement(name=name, text=updated, line=line)
