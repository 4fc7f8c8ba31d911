"""
Overlay strategies: annotations, notes and PST attitude regions.
"""

from __future__ import annotations

from ..config import DefaultsConfig
from ..dom import ATTITUDES, Annotation, Attitude, Note, Position
from ..extractors import (
    set_attitude,
    set_coords,
    set_many_coords,
    set_number,
    set_occurrences,
    set_text,
    set_text_from_ending,
)
from ..runner import RunnerConfig
from .base import RunnerStrategy, registry


def _annotation(defaults: DefaultsConfig) -> RunnerConfig:
    return RunnerConfig(
        keyword="annotation",
        container="annotations",
        factory=Annotation,
        decorators=[set_number, set_occurrences, set_text_from_ending],
    )


def _note(defaults: DefaultsConfig) -> RunnerConfig:
    return RunnerConfig(
        keyword="note",
        container="notes",
        factory=Note,
        decorators=[set_text, set_coords],
        position=Position(defaults.component_visibility, defaults.component_maturity),
    )


def _attitude(keyword: str):
    def make(defaults: DefaultsConfig) -> RunnerConfig:
        return RunnerConfig(
            keyword=keyword,
            container="attitudes",
            factory=Attitude,
            decorators=[set_attitude, set_many_coords, set_text_from_ending],
        )

    return make


registry.register(RunnerStrategy("annotation", "annotations", [_annotation]))
registry.register(RunnerStrategy("note", "notes", [_note]))
registry.register(RunnerStrategy("attitude", "attitudes", [_attitude(k) for k in ATTITUDES]))
