"""
Converter: runs every extraction strategy over preprocessed map text and
merges their containers into one record.

    doc = parse("component Tea [0.8, 0.3]\ncomponent Water [0.4, 0.9]\nTea->Water")
    doc.elements[0].name   # 'Tea'
    doc.links[0].end       # 'Water'
"""

from __future__ import annotations

import logging
from typing import Any

from .builder import build_document
from .config import Config, get_config
from .dom import MapDocument, ParseError
from .preprocess import preprocess
from .runner import ExtractionResult
from .strategies import components as _components  # noqa: F401 - ensure component strategies are registered
from .strategies import document as _document  # noqa: F401 - ensure document strategies are registered
from .strategies import evolution as _evolution  # noqa: F401 - ensure evolve/method strategies are registered
from .strategies import links as _links  # noqa: F401 - ensure link strategy is registered
from .strategies import overlays as _overlays  # noqa: F401 - ensure overlay strategies are registered
from .strategies import pipelines as _pipelines  # noqa: F401 - ensure pipeline strategy is registered
from .strategies.base import registry

logger = logging.getLogger(__name__)

STRATEGY_ORDER = [
    "title",
    "method",
    "evolution",
    "presentation",
    "note",
    "annotation",
    "component",
    "market",
    "ecosystem",
    "pipeline",
    "evolve",
    "anchor",
    "links",
    "submap",
    "url",
    "attitude",
    "accelerator",
]


class Converter:
    """Map text -> MapDocument. Never raises for malformed map text."""

    def __init__(self, config: Config | None = None):
        self.config = config or get_config()

    def convert(self, text: str) -> ExtractionResult:
        """Merged raw record of all strategies, plus their diagnostics."""
        views = preprocess(text, blank=self.config.features.blank_containers)
        merged: dict[str, Any] = {}
        errors: list[ParseError] = []

        for strategy in registry.ordered(STRATEGY_ORDER):
            content = views.stripped if strategy.reads_containers else views.flattened
            try:
                result = strategy.extract(content, self.config)
            except Exception as e:  # noqa: BLE001 - a broken strategy must not blank the map
                logger.exception("strategy %s failed", strategy.name)
                errors.append(ParseError(0, f"{strategy.name}: {e}", "critical"))
                continue
            merged.update(result.fields)
            errors.extend(result.errors)

        return ExtractionResult(fields=merged, errors=errors)

    def parse(self, text: str) -> MapDocument:
        raw = self.convert(text)
        doc = build_document(raw.fields, raw.errors)
        logger.debug(
            "parsed %d components, %d links, %d diagnostics",
            sum(1 for _ in doc.all_components()), len(doc.links), len(doc.diagnostics),
        )
        return doc


def parse(text: str, config: Config | None = None) -> MapDocument:
    """Parse map text into a MapDocument."""
    return Converter(config).parse(text)
