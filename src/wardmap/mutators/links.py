"""
Link edits: delete a link line, set or clear a link's context.

A link is addressed by its endpoint names, unquoted and unescaped, the way
the parser reports them.
"""

from __future__ import annotations

import logging

from ..dom import Link
from ..errors import InvalidInputError, TargetNotFoundError
from ..strategies.links import context_index, is_excluded, parse_link
from .lines import MapLines

logger = logging.getLogger(__name__)


def _links(lines: MapLines):
    """(index, Link) for every link line outside comments."""
    for i, scanned in enumerate(lines.scan):
        line = scanned.strip()
        if not line or is_excluded(line):
            continue
        link = parse_link(line, i + 1)
        if isinstance(link, Link):
            yield i, link


def _check_endpoints(start: str, end: str) -> None:
    if not isinstance(start, str) or not start or not isinstance(end, str) or not end:
        raise InvalidInputError("Link start and end must be non-empty strings")


def find_link(lines: MapLines, start: str, end: str, flow: bool = False,
              flow_value: str | None = None) -> int:
    """
    Index of the first link from start to end. A plain link drawn the other
    way round also matches, but only when no link runs start to end.
    """
    _check_endpoints(start, end)
    reversed_match = None
    for i, link in _links(lines):
        if flow and (not link.flow or (flow_value is not None and link.flow_value != flow_value)):
            continue
        if (link.start, link.end) == (start, end):
            return i
        if not flow and not link.flow and reversed_match is None and (link.start, link.end) == (end, start):
            reversed_match = i
    if reversed_match is not None:
        return reversed_match
    raise TargetNotFoundError(f"Link {start!r} -> {end!r} not found in map text", f"{start}->{end}")


def delete_link(text: str, start: str, end: str, flow: bool = False, flow_value: str | None = None) -> str:
    lines = MapLines(text)
    index = find_link(lines, start, end, flow, flow_value)
    logger.debug("deleted link %r -> %r on line %d", start, end, index + 1)
    del lines.raw[index]
    return lines.text()


def update_link_context(text: str, start: str, end: str, context: str) -> str:
    """
    Set the `;context` of the link from start to end, or remove it when
    context is empty. Line breaks in context are dropped.
    """
    if not isinstance(context, str):
        raise InvalidInputError("Link context must be a string")
    context = context.replace("\n", "").replace("\r", "").strip()
    lines = MapLines(text)
    _check_endpoints(start, end)

    for index, link in _links(lines):
        if (link.start, link.end) != (start, end):
            continue
        masked = lines.masked[index]
        code_end = len(masked.rstrip())
        ctx = context_index(masked)
        body_end = code_end if ctx == -1 else len(masked[:ctx].rstrip())
        lines.edit(index, [(body_end, code_end, f";{context}" if context else "")])
        logger.debug("link %r -> %r on line %d context %r", start, end, index + 1, context)
        return lines.text()

    raise TargetNotFoundError("Link not found in map text", f"{start}->{end}")
