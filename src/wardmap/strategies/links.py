"""
Link strategy.

Links have no keyword: any line not claimed by another construct is a link
candidate. Operators, searched outside quoted names:

    A->B          plain link
    A+>B          flow, future
    A+<>B         flow, past
    A+<B          flow, future
    A+'v'>B       flow with value, future
    A+'v'<>B      flow with value, past and future
    A+'v'<B       flow with value, past

An optional `;context` suffix is kept as the link context.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..config import Config
from ..dom import Link, ParseError
from ..extractors import find_closing_quote, unescape_name
from ..preprocess import split_lines
from ..runner import ExtractionResult
from .base import ExtractionStrategy, registry

logger = logging.getLogger(__name__)

NOT_LINKS = (
    "evolution", "anchor", "evolve", "component", "style", "build", "buy",
    "outsource", "title", "annotation", "annotations", "pipeline", "note",
    "pioneers", "settlers", "townplanners", "submap", "url", "market",
    "ecosystem", "{", "}", "accelerator", "deaccelerator", "size",
)

_VALUED_FLOW = re.compile(r"\+'([^']*)'(<>|<|>)")


@dataclass
class LinkOperator:
    token: str
    flow: bool = False
    future: bool = False
    past: bool = False
    flow_value: str | None = None


_PLAIN_OPERATORS = (
    LinkOperator("+>", flow=True, future=True),
    LinkOperator("+<>", flow=True, past=True),
    LinkOperator("+<", flow=True, future=True),
    LinkOperator("->"),
)

_VALUED_FLAGS = {
    ">": {"future": True},
    "<>": {"past": True, "future": True},
    "<": {"past": True},
}


def is_excluded(line: str) -> bool:
    """True when a line belongs to some other construct."""
    return any(line.startswith(word) or f"({word})" in line for word in NOT_LINKS)


def find_operator(line: str) -> tuple[int, LinkOperator] | None:
    """First link operator outside quotes, as (position, operator)."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == '"':
            end = find_closing_quote(line, i + 1)
            if end == -1:
                return None
            i = end + 1
            continue
        if ch == "+":
            valued = _VALUED_FLOW.match(line, i)
            if valued is not None:
                flags = _VALUED_FLAGS[valued.group(2)]
                return i, LinkOperator(valued.group(0), flow=True, flow_value=valued.group(1), **flags)
        for op in _PLAIN_OPERATORS:
            if line.startswith(op.token, i):
                return i, op
        i += 1
    return None


def context_index(line: str) -> int:
    """Index of the `;` starting a context suffix (outside quotes), or -1."""
    i = 0
    while i < len(line):
        if line[i] == '"':
            end = find_closing_quote(line, i + 1)
            if end == -1:
                return -1
            i = end + 1
            continue
        if line[i] == ";":
            return i
        i += 1
    return -1


def split_context(line: str) -> tuple[str, str | None]:
    """Split off a `;context` suffix; a second `;` ends the context."""
    idx = context_index(line)
    if idx == -1:
        return line, None
    return line[:idx], line[idx + 1:].split(";")[0].strip()


def endpoint(text: str) -> str:
    """Trim and unquote one side of a link."""
    text = text.strip()
    if len(text) >= 2 and text.startswith('"') and find_closing_quote(text, 1) == len(text) - 1:
        return unescape_name(text[1:-1])
    return text


def parse_link(line: str, number: int) -> Link | ParseError:
    body, context = split_context(line)
    found = find_operator(body)
    if found is None:
        return ParseError(number, f"Unrecognised link syntax: {line}", "error")

    pos, op = found
    start = endpoint(body[:pos])
    end = endpoint(body[pos + len(op.token):])
    if not start and not end:
        return ParseError(number, f"Link has no endpoints: {line}", "error")

    return Link(
        id=str(number),
        line=number,
        start=start,
        end=end,
        flow=op.flow,
        flow_value=op.flow_value,
        future=op.future,
        past=op.past,
        context=context,
    )


class LinkStrategy(ExtractionStrategy):
    """Every remaining line that carries a link operator."""

    @property
    def name(self) -> str:
        return "links"

    @property
    def containers(self) -> list[str]:
        return ["links"]

    def extract(self, content: str, config: Config) -> ExtractionResult:
        links: list[Link] = []
        errors: list[ParseError] = []

        for i, raw in enumerate(split_lines(content)):
            line = raw.strip()
            if not line or is_excluded(line):
                continue
            result = parse_link(line, i + 1)
            if isinstance(result, ParseError):
                logger.debug("line %d: %s", result.line, result.message)
                errors.append(result)
            else:
                links.append(result)

        return ExtractionResult(fields={"links": links}, errors=errors)


registry.register(LinkStrategy())
