"""
Map property upserts: title, style, size and evolution stages.

Each property lives on one line. Updating replaces that whole line with
freshly generated text; when the line is missing it is inserted after the
title line, or at the top of the map when there is no title.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..config import Config, get_config
from ..dom import STYLES, Size
from ..errors import InvalidInputError
from ..preprocess import split_lines, strip_comments
from ..strategies.document import DEFAULT_TITLE

logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"^\s*title\s+(.+)$")
STYLE_PATTERN = re.compile(r"^\s*style\s+(\S+)\s*$")
SIZE_PATTERN = re.compile(r"^\s*size\s+\[\s*(\d+)\s*,\s*(\d+)\s*\]")
EVOLUTION_PATTERN = re.compile(r"^\s*evolution\s+(.+?)->(.+?)->(.+?)->(.+?)\s*$")

DEFAULT_STAGES = ("Genesis", "Custom Built", "Product", "Commodity")


@dataclass
class PropertyUpdate:
    text: str
    added: bool
    updated: bool
    line_number: int  # 1-based line holding the property afterwards


def _find(text: str, pattern: re.Pattern) -> tuple[int, re.Match] | None:
    for i, line in enumerate(split_lines(strip_comments(text))):
        match = pattern.match(line)
        if match is not None:
            return i, match
    return None


def upsert_line(text: str, pattern: re.Pattern, new_line: str, after_title: bool = True) -> PropertyUpdate:
    """Replace the first line matching pattern, or insert new_line."""
    lines = split_lines(text) if text else []
    found = _find(text, pattern) if text else None

    if found is not None:
        index = found[0]
        lines[index] = new_line
        logger.debug("updated line %d: %s", index + 1, new_line)
        return PropertyUpdate("\n".join(lines), added=False, updated=True, line_number=index + 1)

    index = 0
    if after_title and text:
        title = _find(text, TITLE_PATTERN)
        if title is not None:
            index = title[0] + 1
    lines.insert(index, new_line)
    logger.debug("inserted line %d: %s", index + 1, new_line)
    return PropertyUpdate("\n".join(lines), added=True, updated=False, line_number=index + 1)


def update_title(text: str, title: str, config: Config | None = None) -> PropertyUpdate:
    limits = (config or get_config()).limits
    if not isinstance(title, str) or not title.strip():
        raise InvalidInputError("Title must be a non-empty string")
    title = title.strip()
    if len(title) > limits.max_title:
        raise InvalidInputError(f"Title must be at most {limits.max_title} characters")
    if "\n" in title:
        raise InvalidInputError("Title must be a single line")
    return upsert_line(text, TITLE_PATTERN, f"title {title}", after_title=False)


def update_style(text: str, style: str) -> PropertyUpdate:
    if style not in STYLES:
        raise InvalidInputError(f"Style must be one of {', '.join(STYLES)}, got {style!r}")
    return upsert_line(text, STYLE_PATTERN, f"style {style}")


def update_size(text: str, width: int, height: int, config: Config | None = None) -> PropertyUpdate:
    limits = (config or get_config()).limits
    for label, value in (("Width", width), ("Height", height)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidInputError(f"{label} must be an integer, got {value!r}")
        if not limits.min_size <= value <= limits.max_size:
            raise InvalidInputError(
                f"{label} must be between {limits.min_size} and {limits.max_size}, got {value}"
            )
    return upsert_line(text, SIZE_PATTERN, f"size [{width}, {height}]")


def update_evolution_stages(text: str, stages: Sequence[str], config: Config | None = None) -> PropertyUpdate:
    limits = (config or get_config()).limits
    if len(stages) != 4:
        raise InvalidInputError(f"Exactly 4 evolution stages are required, got {len(stages)}")
    cleaned = []
    for stage in stages:
        if not isinstance(stage, str) or not stage.strip():
            raise InvalidInputError("Stage names must be non-empty strings")
        stage = stage.strip()
        if len(stage) > limits.max_stage_name:
            raise InvalidInputError(f"Stage names must be at most {limits.max_stage_name} characters")
        if "->" in stage or "\n" in stage:
            raise InvalidInputError(f"Stage name {stage!r} may not contain '->' or line breaks")
        cleaned.append(stage)
    return upsert_line(text, EVOLUTION_PATTERN, "evolution " + "->".join(cleaned))


def get_title(text: str) -> str:
    found = _find(text, TITLE_PATTERN)
    return found[1].group(1).strip() if found else DEFAULT_TITLE


def get_style(text: str) -> str:
    found = _find(text, STYLE_PATTERN)
    if found is None or found[1].group(1) not in STYLES:
        return "plain"
    return found[1].group(1)


def get_size(text: str) -> Size | None:
    found = _find(text, SIZE_PATTERN)
    if found is None:
        return None
    return Size(int(found[1].group(1)), int(found[1].group(2)))


def get_evolution_stages(text: str) -> list[str]:
    found = _find(text, EVOLUTION_PATTERN)
    if found is None:
        return list(DEFAULT_STAGES)
    return [stage.strip() for stage in found[1].groups()]
