"""
Line helpers shared by the text mutators.

Mutators locate edits on a masked view of the map text, where comment
characters are blanked to spaces, and apply them as column spans to the raw
line at the same index. Comments anywhere on an edited line survive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import InvalidInputError, LineOutOfRangeError
from ..extractors import find_closing_quote, unescape_name
from ..preprocess import mask_comments, split_lines, strip_comments

DECLARATION_KEYWORDS = (
    "component", "anchor", "market", "ecosystem", "submap", "note",
    "pipeline", "accelerator", "deaccelerator",
)

_HEAD = re.compile(r"^(\s*)([a-z]+)(\s+)")

Edit = tuple[int, int, str]


@dataclass
class Declaration:
    """A `keyword name ...` line split into editable pieces."""
    keyword: str
    name: str
    head: str  # indentation, keyword and the spaces after it
    raw_name: str  # name exactly as written, quotes included
    tail: str  # everything after the name

    @property
    def name_span(self) -> tuple[int, int]:
        return len(self.head), len(self.head) + len(self.raw_name)

    @property
    def tail_start(self) -> int:
        return len(self.head) + len(self.raw_name)


def parse_declaration(line: str, keywords: tuple[str, ...] = DECLARATION_KEYWORDS) -> Declaration | None:
    match = _HEAD.match(line)
    if match is None or match.group(2) not in keywords:
        return None
    head = match.group(0)
    rest = line[match.end():]

    if rest.startswith('"'):
        end = find_closing_quote(rest, 1)
        if end != -1:
            return Declaration(match.group(2), unescape_name(rest[1:end]), head, rest[:end + 1], rest[end + 1:])

    cut = len(rest)
    for stop in ("[", "{"):
        idx = rest.find(stop)
        if idx != -1:
            cut = min(cut, idx)
    raw_name = rest[:cut].rstrip()
    name = raw_name.strip()
    if not name:
        return None
    return Declaration(match.group(2), name, head, raw_name, rest[len(raw_name):])


def apply_edits(line: str, edits: list[Edit]) -> str:
    """Replace (start, end, text) column spans; spans must not overlap."""
    for start, end, text in sorted(edits, reverse=True):
        line = line[:start] + text + line[end:]
    return line


class MapLines:
    """Raw lines with their comment-stripped and comment-masked views, index for index."""

    def __init__(self, text: str):
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Map text must be a non-empty string")
        self.raw = split_lines(text)
        self.scan = split_lines(strip_comments(text))
        self.masked = split_lines(mask_comments(text))

    def __len__(self) -> int:
        return len(self.raw)

    def check(self, line_number: int) -> int:
        """0-based index for a 1-based line number."""
        if line_number < 1 or line_number > len(self.raw):
            raise LineOutOfRangeError(line_number, len(self.raw))
        return line_number - 1

    def declaration(self, index: int, keywords: tuple[str, ...] = DECLARATION_KEYWORDS) -> Declaration | None:
        """Declaration on a line, with spans that address the raw line."""
        return parse_declaration(self.masked[index], keywords)

    def declarations(self, keywords: tuple[str, ...] = DECLARATION_KEYWORDS):
        """(index, Declaration) for every declaration line outside comments."""
        for i in range(len(self.masked)):
            declaration = self.declaration(i, keywords)
            if declaration is not None:
                yield i, declaration

    def edit(self, index: int, edits: list[Edit]) -> None:
        self.raw[index] = apply_edits(self.raw[index], edits)

    def text(self) -> str:
        return "\n".join(self.raw)
