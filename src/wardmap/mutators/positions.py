"""
Position rewrites.

Only the coordinate bracket (or the evolve maturity number) of the target
line changes; labels, decorators and trailing comments stay as written.
"""

from __future__ import annotations

import logging
import re

from ..dom import EvolvedElement
from ..errors import FieldError, InvalidInputError, TargetNotFoundError
from ..extractors import DecoratorContext, format_coordinate, quoted_names_end, set_evolve_names
from .lines import Declaration, Edit, MapLines

logger = logging.getLogger(__name__)

_BRACKET = re.compile(r"\[[^\[\]]*\]")
_INLINE_EVOLVE = re.compile(r"(?<![\w-])(evolve\s+)([0-9]*\.?[0-9]+)")
_EVOLVE_HEAD = re.compile(r"^\s*evolve\s+")
_STATEMENT_MATURITY = re.compile(r"(?<=\s)[0-9]?\.[0-9]+")
_LABEL_START = re.compile(r"\slabel\s*\[")


def _check_number(label: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InvalidInputError(f"{label} must be a number, got {value!r}")


def find_declaration(lines: MapLines, target: str | int, keyword: str | None = None) -> tuple[int, Declaration]:
    """Declaration addressed by 1-based line number or by name."""
    if isinstance(target, int):
        index = lines.check(target)
        declaration = lines.declaration(index)
        if declaration is None or (keyword and declaration.keyword != keyword):
            raise TargetNotFoundError(f"No element declared on line {target}", str(target))
        return index, declaration

    for index, declaration in lines.declarations():
        if declaration.name == target and (keyword is None or declaration.keyword == keyword):
            return index, declaration
    raise TargetNotFoundError(f"Element {target!r} not found in map text", target)


def update_position(text: str, target: str | int, visibility: float, maturity: float,
                    keyword: str | None = None) -> str:
    """Move an element. Single-value brackets (pipeline children) keep one value."""
    _check_number("Visibility", visibility)
    _check_number("Maturity", maturity)
    lines = MapLines(text)
    index, declaration = find_declaration(lines, target, keyword)

    tail, start = declaration.tail, declaration.tail_start
    coords = f"[{format_coordinate(visibility)}, {format_coordinate(maturity)}]"
    bracket = _BRACKET.search(tail) if tail.lstrip().startswith("[") else None
    if bracket is not None:
        if "," not in bracket.group(0):
            coords = f"[{format_coordinate(maturity)}]"
        lines.edit(index, [(start + bracket.start(), start + bracket.end(), coords)])
    else:
        lines.edit(index, [(start, start, f" {coords}")])

    logger.debug("moved %r on line %d to %s", declaration.name, index + 1, coords)
    return lines.text()


def _evolve_name(line: str) -> str | None:
    evolved = EvolvedElement()
    try:
        set_evolve_names(evolved, line, DecoratorContext(keyword="evolve"))
    except FieldError:
        return None
    return evolved.name


def update_evolve_maturity(text: str, name: str, maturity: float) -> str:
    """
    Change where a component evolves to: `component A [..] evolve 0.8` or
    `evolve A 0.8`, whichever exists first.
    """
    _check_number("Maturity", maturity)
    lines = MapLines(text)
    value = format_coordinate(maturity)

    for index, declaration in lines.declarations():
        if declaration.name != name:
            continue
        match = _INLINE_EVOLVE.search(declaration.tail)
        if match is not None:
            start = declaration.tail_start
            lines.edit(index, [(start + match.start(2), start + match.end(2), value)])
            return lines.text()

    for index, scanned in enumerate(lines.scan):
        line = scanned.strip()
        if not line.startswith("evolve ") or _evolve_name(line) != name:
            continue
        lines.edit(index, [_statement_maturity_edit(lines.masked[index], value)])
        logger.debug("evolve %r on line %d now targets %s", name, index + 1, value)
        return lines.text()

    raise TargetNotFoundError(f"No evolution found for {name!r}", name)


def _statement_maturity_edit(line: str, value: str) -> Edit:
    """Span of the maturity number on an evolve statement, after its names."""
    head = _EVOLVE_HEAD.match(line)
    names_end = head.end() + quoted_names_end(line[head.end():])
    label = _LABEL_START.search(line, names_end)
    body_end = label.start() if label else len(line.rstrip())
    matches = list(_STATEMENT_MATURITY.finditer(line, names_end, body_end))
    if not matches:
        return body_end, body_end, f" {value}"
    last = matches[-1]
    return last.start(), last.end(), value
