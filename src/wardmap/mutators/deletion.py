"""
Component and PST region deletion.

A component is addressed by its 1-based line number, by a generated id
(`component-cup-of-tea-4`, `component_cup_of_tea`) or by its name. Deleting
it also removes the link, evolve and method lines that refer to it by name.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..builder import synthetic_id
from ..dom import Attitude, EvolvedElement
from ..errors import FieldError, InvalidInputError, TargetNotFoundError
from ..extractors import DecoratorContext, escape_name, format_name, set_evolve_names
from ..preprocess import split_lines
from .lines import Declaration, MapLines, parse_declaration
from .pst import find_pst_line

logger = logging.getLogger(__name__)

_REFERENCE_KEYWORDS = ("evolve", "build", "buy", "outsource")


@dataclass
class DeletedComponent:
    id: str
    type: str
    line: int  # 0-based index of the removed line
    original_text: str
    name: str


@dataclass
class DeletionResult:
    text: str
    deleted: DeletedComponent


def generated_id(declaration: Declaration, index: int) -> str:
    """`{type}-{slug}-{index}`; distinct names stay distinct ids."""
    slug = re.sub(r"[^a-zA-Z0-9]", "-", declaration.name).lower()
    return f"{declaration.keyword}-{slug}-{index}"


def _locate(lines: MapLines, identifier: str, expected_type: str | None) -> tuple[int, Declaration]:
    not_found = TargetNotFoundError(f'Component with ID "{identifier}" not found in map text', identifier)

    if identifier.isdigit():
        index = lines.check(int(identifier))
        declaration = lines.declaration(index)
        if declaration is None or (expected_type and declaration.keyword != expected_type):
            raise not_found
        return index, declaration

    for index, declaration in lines.declarations():
        if expected_type and declaration.keyword != expected_type:
            continue
        ids = (generated_id(declaration, index), synthetic_id(declaration.keyword, declaration.name))
        if identifier in ids or identifier == declaration.name:
            return index, declaration
    raise not_found


def _written_forms(name: str) -> set[str]:
    """Every way a name can appear as a link endpoint in map text."""
    return {name, format_name(name), f'"{escape_name(name)}"'}


def refers_to(line: str, name: str) -> bool:
    """
    True for a line that references name: a link containing `name->` or
    `->name` (plain substring match, with the name as written, quoted or
    not), or an evolve/method statement for it.
    """
    line = line.strip()
    if not line:
        return False
    reference = parse_declaration(line, _REFERENCE_KEYWORDS)
    if reference is not None:
        if reference.keyword != "evolve":
            return reference.name == name
        evolved = EvolvedElement()
        try:
            set_evolve_names(evolved, line, DecoratorContext(keyword="evolve"))
        except FieldError:
            return False
        return name in (evolved.name, evolved.override)
    return any(f"{form}->" in line or f"->{form}" in line for form in _written_forms(name))


def delete_component(text: str, identifier: str, expected_type: str | None = None) -> DeletionResult:
    lines = MapLines(text)
    if not isinstance(identifier, str) or not identifier.strip():
        raise InvalidInputError("Component ID must be a non-empty string")
    index, declaration = _locate(lines, identifier.strip(), expected_type)

    original = lines.raw[index]
    # a pipeline shares its name with a component; references belong to that
    cascade = declaration.keyword != "pipeline"
    kept = [
        raw for i, (raw, scanned) in enumerate(zip(lines.raw, lines.scan))
        if i != index and not (cascade and refers_to(scanned, declaration.name))
    ]
    removed = len(lines.raw) - len(kept) - 1
    logger.debug("deleted %s %r on line %d and %d references",
                 declaration.keyword, declaration.name, index + 1, removed)

    return DeletionResult(
        text="\n".join(kept),
        deleted=DeletedComponent(
            id=identifier,
            type=declaration.keyword,
            line=index,
            original_text=original,
            name=declaration.name,
        ),
    )


def delete_pst_region(text: str, region: Attitude) -> str:
    """Remove the line declaring a PST region."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Map text must be a non-empty string")
    index = find_pst_line(text, region)
    lines = split_lines(text)
    del lines[index]
    logger.debug("deleted %s region on line %d", region.kind, index + 1)
    return "\n".join(lines)
