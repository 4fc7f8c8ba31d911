"""
PST (pioneers / settlers / townplanners) region utilities.

A region line is `pioneers [v1, m1, v2, m2] optional text`. Regions carry no
name, so a region from the parsed model is found again by its line number,
falling back to kind plus bounding box.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..dom import ATTITUDES, Attitude
from ..errors import InvalidInputError, TargetNotFoundError
from ..extractors import format_coordinate, parse_float
from ..preprocess import split_lines, strip_comments

logger = logging.getLogger(__name__)

PST_PATTERN = re.compile(r"^\s*(pioneers|settlers|townplanners)\s*\[([^\]]*)\](?:\s+(.+))?$")
BOX_TOLERANCE = 0.001


@dataclass
class PSTLine:
    kind: str
    box: tuple[float, float, float, float]  # v1, m1, v2, m2
    text: str


def parse_pst_line(line: str) -> PSTLine | None:
    match = PST_PATTERN.match(line)
    if match is None:
        return None
    values = [parse_float(v) for v in re.sub(r"\s", "", match.group(2)).split(",")]
    if len(values) != 4 or any(v is None for v in values):
        return None
    return PSTLine(match.group(1), tuple(values), (match.group(3) or "").strip())


def _same_box(a: tuple[float, ...], b: tuple[float, ...]) -> bool:
    return all(abs(x - y) <= BOX_TOLERANCE for x, y in zip(a, b))


def region_box(region: Attitude) -> tuple[float, float, float, float]:
    return (region.visibility1, region.maturity1, region.visibility2, region.maturity2)


def find_pst_line(text: str, region: Attitude) -> int:
    """0-based index of the line declaring region."""
    lines = split_lines(strip_comments(text))
    box = region_box(region)

    if 1 <= region.line <= len(lines):
        parsed = parse_pst_line(lines[region.line - 1])
        if parsed is not None and parsed.kind == region.kind:
            return region.line - 1

    for i, line in enumerate(lines):
        parsed = parse_pst_line(line)
        if parsed is not None and parsed.kind == region.kind and _same_box(parsed.box, box):
            return i

    raise TargetNotFoundError("PST element not found in map text", region.kind)


def generate_pst_syntax(kind: str, box: tuple[float, float, float, float], text: str = "") -> str:
    if kind not in ATTITUDES:
        raise InvalidInputError(f"Unknown PST type {kind!r}")
    coords = ", ".join(format_coordinate(v) for v in box)
    line = f"{kind} [{coords}]"
    return f"{line} {text}" if text else line


def update_pst_region(text: str, region: Attitude, box: tuple[float, float, float, float]) -> str:
    """Rewrite the bounding box of region, keeping its kind and text."""
    if len(box) != 4:
        raise InvalidInputError("A PST box needs exactly 4 values")
    index = find_pst_line(text, region)
    lines = split_lines(text)
    parsed = parse_pst_line(strip_comments(lines[index]))
    indent = lines[index][:len(lines[index]) - len(lines[index].lstrip())]
    lines[index] = indent + generate_pst_syntax(region.kind, box, parsed.text if parsed else region.text)
    logger.debug("moved %s region on line %d", region.kind, index + 1)
    return "\n".join(lines)
