"""
Unified model builder.

Turns the merged output of the extraction strategies into a MapDocument:
fills missing ids, resolves name references (methods, evolve statements, pipeline
visibility) and settles label spacing for evolving and method components.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any

from .dom import (
    EvolvedElement,
    Label,
    MapDocument,
    ParseError,
    PositionedElement,
    Presentation,
    default_evolution,
)
from .strategies.document import DEFAULT_TITLE

logger = logging.getLogger(__name__)

_LIST_FIELDS = (
    "elements", "anchors", "markets", "ecosystems", "submaps", "pipelines",
    "evolved", "links", "annotations", "notes", "urls", "attitudes",
    "accelerators", "methods",
)


def synthetic_id(kind: str, name: str) -> str:
    """`component_cup_of_tea` style id for records that arrive without one."""
    slug = re.sub(r"\s+", "_", name).lower()
    return f"{kind}_{slug}"


def build_document(fields: dict[str, Any], errors: list[ParseError]) -> MapDocument:
    """Normalize a merged raw record into a render-ready MapDocument."""
    doc = MapDocument(
        title=fields.get("title") or DEFAULT_TITLE,
        presentation=fields.get("presentation") or Presentation(),
        evolution=fields.get("evolution") or default_evolution(),
        diagnostics=list(errors),
    )
    for name in _LIST_FIELDS:
        setattr(doc, name, list(fields.get(name, [])))

    # records assembled outside the line-scan runner carry no line id
    for element in doc.all_components():
        if not element.id:
            element.id = synthetic_id(element.kind, element.name)

    index = doc.name_index()
    _apply_methods(doc, index)
    _apply_evolution(doc, index)
    _resolve_pipelines(doc, index)
    return doc


def _spaced_label(label: Label, spacing: int, x: float | None) -> Label:
    """Push a near-default label below the element; keep authored offsets."""
    result = Label(label.x, label.y)
    if abs(result.y) <= 10:
        result.y = spacing * 10
    if x is not None and abs(result.x) <= 10:
        result.x = x
    return result


def _apply_methods(doc: MapDocument, index: dict[str, PositionedElement]) -> None:
    for method in doc.methods:
        component = index.get(method.name)
        if component is None:
            logger.debug("method %s refers to unknown component %r", method.method, method.name)
            continue
        setattr(component.decorators, method.method, True)
        component.increase_label_spacing = max(component.increase_label_spacing, 2)
        component.label = _spaced_label(component.label, component.increase_label_spacing, 5)


def _apply_evolution(doc: MapDocument, index: dict[str, PositionedElement]) -> None:
    stated: set[str] = set()

    for evolved in doc.evolved:
        stated.add(evolved.name)
        component = index.get(evolved.name)
        if component is None:
            logger.debug("evolve refers to unknown component %r", evolved.name)
            continue
        spacing = max(component.increase_label_spacing, evolved.increase_label_spacing, 2)
        component.evolving = True
        component.evolve_maturity = evolved.maturity
        component.increase_label_spacing = spacing
        component.label = _spaced_label(component.label, spacing, 16 if evolved.override else 5)
        evolved.increase_label_spacing = spacing
        evolved.label = _spaced_label(evolved.label, spacing, 16 if evolved.override else None)

    # `component A [..] evolve 0.8` with no evolve statement of its own
    for component in list(doc.all_components()):
        if not component.evolving or component.name in stated or component.evolve_maturity is None:
            continue
        spacing = max(component.increase_label_spacing, 2)
        doc.evolved.append(EvolvedElement(
            id=f"{component.id}_evolved",
            line=component.line,
            name=component.name,
            maturity=component.evolve_maturity,
            label=_spaced_label(replace(component.label), spacing, None),
            increase_label_spacing=spacing,
        ))


def _resolve_pipelines(doc: MapDocument, index: dict[str, PositionedElement]) -> None:
    for pipeline in doc.pipelines:
        owner = index.get(pipeline.name)
        if owner is None:
            pipeline.hidden = True
            logger.debug("pipeline %r has no matching component", pipeline.name)
        else:
            pipeline.visibility = owner.visibility
        for child in pipeline.components:
            child.visibility = pipeline.visibility
