"""
Line-scan runner.

Walks map text line by line, picks the lines that start with a keyword and
builds one element per line by applying an ordered list of field extractors.
One bad line, or one bad field, never stops the pass.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .config import DefaultsConfig
from .dom import Element, ParseError, Position
from .errors import FieldError
from .extractors import Decorator, DecoratorContext
from .preprocess import split_lines

logger = logging.getLogger(__name__)

# Constructs that never get a synthesized "{Keyword} {line}" name
UNNAMED_KEYWORDS = frozenset({
    "pioneers", "settlers", "townplanners",
    "note", "annotation", "title", "presentation", "size", "style",
})


@dataclass
class ExtractionResult:
    """Named output containers plus the diagnostics gathered on the way."""
    fields: dict[str, Any] = field(default_factory=dict)
    errors: list[ParseError] = field(default_factory=list)


@dataclass
class RunnerConfig:
    keyword: str
    container: str
    factory: Callable[[], Element]
    decorators: list[Decorator]
    position: Position = field(default_factory=Position)
    critical: tuple[Decorator, ...] = ()  # failures here mean the line has no name


class LineScanRunner:
    """Applies one RunnerConfig to every qualifying line of a text."""

    def __init__(self, config: RunnerConfig, defaults: DefaultsConfig | None = None):
        self.config = config
        self.context = DecoratorContext(
            keyword=config.keyword,
            position=config.position,
            defaults=defaults or DefaultsConfig(),
        )

    def qualifies(self, line: str) -> bool:
        """Keyword followed by a mandatory space (`component` but not `componentX`)."""
        return line.startswith(f"{self.config.keyword} ")

    def run(self, text: str) -> ExtractionResult:
        elements: list[Element] = []
        errors: list[ParseError] = []

        for i, raw in enumerate(split_lines(text)):
            line = raw.strip()
            if not line or not self.qualifies(line):
                continue
            element = self.build(line, i + 1, errors)
            if element is not None:
                elements.append(element)

        return ExtractionResult(fields={self.config.container: elements}, errors=errors)

    def build(self, line: str, number: int, errors: list[ParseError]) -> Element | None:
        """Element for one qualifying line, or None when the line is dropped."""
        keyword = self.config.keyword
        element = self.config.factory()
        element.id = str(number)
        element.line = number

        for decorator in self.config.decorators:
            try:
                decorator(element, line, self.context)
            except FieldError as e:
                errors.append(ParseError(number, str(e), "warning"))
                logger.debug("line %d: %s", number, e)
                if decorator in self.config.critical and keyword not in UNNAMED_KEYWORDS:
                    element.name = f"{keyword.capitalize()} {number}"
            except Exception as e:  # noqa: BLE001 - any decorator crash becomes a diagnostic
                if decorator not in self.config.critical:
                    errors.append(ParseError(number, f"{decorator.__name__}: {e}", "warning"))
                    logger.debug("line %d: %s failed: %s", number, decorator.__name__, e)
                    continue
                errors.append(ParseError(number, f"Could not read {keyword}: {e}", "critical"))
                logger.warning("line %d: could not read %s: %s", number, keyword, e)
                if keyword == "component":
                    return self._placeholder(number)
                return None

        return element

    def _placeholder(self, number: int) -> Element:
        """Midpoint stand-in so a broken component line still shows up."""
        element = self.config.factory()
        element.id = str(number)
        element.line = number
        element.name = f"Component {number}"
        element.visibility = 0.5
        element.maturity = 0.5
        element.placeholder = True
        return element
