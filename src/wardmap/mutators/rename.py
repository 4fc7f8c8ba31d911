"""
Component rename.

Rewrites the declaration line and every line that refers to the component
by name: links, pipelines, build/buy/outsource methods and evolve
statements. New names that need it are quoted and escaped.
"""

from __future__ import annotations

import logging
import re

from ..dom import Link
from ..errors import InvalidInputError, TargetNotFoundError
from ..extractors import find_closing_quote, format_name
from ..strategies.links import context_index, endpoint, find_operator, is_excluded, parse_link
from .lines import DECLARATION_KEYWORDS, Edit, MapLines, parse_declaration

logger = logging.getLogger(__name__)

FORBIDDEN = ("[", "]", ";", "->", "+>", "+<")

_DEFINITIONS = tuple(k for k in DECLARATION_KEYWORDS if k != "pipeline")
_REFERENCES = ("pipeline", "build", "buy", "outsource")
_EVOLVE_HEAD = re.compile(r"^(\s*evolve\s+)")
_EVOLVE_MATURITY = re.compile(r"\s[0-9]?\.[0-9]+")
_SPACED = re.compile(r"^(\s*)(.*?)(\s*)$", re.S)


def validate_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError("Component name must be a non-empty string")
    for token in FORBIDDEN:
        if token in name:
            raise InvalidInputError(f"Component name may not contain {token!r}")
    return name.strip()


def _swap(line: str, start: int, end: int, old: str, new_raw: str) -> list[Edit]:
    """Edit replacing line[start:end] when it names old, keeping its spacing."""
    segment = line[start:end]
    if endpoint(segment) != old:
        return []
    lead, core, _ = _SPACED.match(segment).groups()
    return [(start + len(lead), start + len(lead) + len(core), new_raw)]


def _link_edits(line: str, old: str, new_raw: str) -> list[Edit]:
    found = find_operator(line)
    if found is None:
        return []
    pos, op = found
    right = pos + len(op.token)
    ctx = context_index(line[right:])
    body_end = len(line) if ctx == -1 else right + ctx
    return _swap(line, 0, pos, old, new_raw) + _swap(line, right, body_end, old, new_raw)


def _evolve_edits(line: str, old: str, new_raw: str) -> list[Edit]:
    head = _EVOLVE_HEAD.match(line)
    if head is None:
        return []
    base = head.end()
    rest = line[base:]

    if rest.startswith('"'):
        end = find_closing_quote(rest, 1)
        if end == -1:
            return []
        cut = end + 1
    else:
        arrow = rest.find("->")
        number = _EVOLVE_MATURITY.search(rest)
        cut = arrow if arrow != -1 else (number.start() if number else len(rest))
    edits = _swap(line, base, base + cut, old, new_raw)

    after = base + cut
    if line[after:].lstrip().startswith("->"):
        target = line.find("->", after) + 2
        quoted = line[target:].lstrip()
        if quoted.startswith('"'):
            offset = len(line) - len(quoted)
            end = find_closing_quote(line, offset + 1)
            cut = end + 1 if end != -1 else len(line)
        else:
            number = _EVOLVE_MATURITY.search(line, target)
            cut = number.start() if number else len(line)
        edits += _swap(line, target, cut, old, new_raw)

    return edits


def rename_component(text: str, old_name: str, new_name: str, line_number: int | None = None) -> str:
    new_name = validate_name(new_name)
    lines = MapLines(text)
    new_raw = format_name(new_name)

    if line_number is not None:
        index = lines.check(line_number)
        declaration = lines.declaration(index, _DEFINITIONS)
        if declaration is None or declaration.name != old_name:
            raise TargetNotFoundError(f"Component {old_name!r} is not declared on line {line_number}", old_name)
    else:
        for index, declaration in lines.declarations(_DEFINITIONS):
            if declaration.name == old_name:
                break
        else:
            raise TargetNotFoundError(f"Component {old_name!r} not found in map text", old_name)

    lines.edit(index, [(*declaration.name_span, new_raw)])
    changed = 1

    for i, scanned in enumerate(lines.scan):
        if i == index or not scanned.strip():
            continue
        masked = lines.masked[i]
        stripped = scanned.strip()

        reference = parse_declaration(masked, _REFERENCES)
        if reference is not None:
            edits = [(*reference.name_span, new_raw)] if reference.name == old_name else []
        elif stripped.startswith("evolve "):
            edits = _evolve_edits(masked, old_name, new_raw)
        elif not is_excluded(stripped) and isinstance(parse_link(stripped, i + 1), Link):
            edits = _link_edits(masked, old_name, new_raw)
        else:
            continue
        if edits:
            lines.edit(i, edits)
            changed += 1

    logger.debug("renamed %r to %r on %d lines", old_name, new_name, changed)
    return lines.text()
