"""
Positioned element strategies: component, anchor, market, ecosystem,
submap, plus accelerators.
"""

from __future__ import annotations

from functools import partial

from ..config import DefaultsConfig
from ..dom import Accelerator, Position, PositionedElement
from ..extractors import (
    is_deaccelerator,
    set_coords,
    set_decorators,
    set_evolve,
    set_inertia,
    set_label,
    set_name,
    set_ref,
)
from ..runner import RunnerConfig
from .base import RunnerStrategy, registry


def _component_position(defaults: DefaultsConfig) -> Position:
    return Position(defaults.component_visibility, defaults.component_maturity)


def positioned(keyword: str, container: str, extra=(), anchor: bool = False):
    """RunnerConfig factory for a positioned element keyword."""

    def make(defaults: DefaultsConfig) -> RunnerConfig:
        position = (
            Position(defaults.anchor_visibility, defaults.anchor_maturity)
            if anchor else _component_position(defaults)
        )
        return RunnerConfig(
            keyword=keyword,
            container=container,
            factory=partial(PositionedElement, kind=keyword),
            decorators=[
                set_name,
                set_decorators,  # before set_label, it scales the default offset
                set_coords,
                set_label,
                set_inertia,
                *extra,
            ],
            position=position,
            critical=(set_name,),
        )

    return make


def _accelerator(keyword: str):
    def make(defaults: DefaultsConfig) -> RunnerConfig:
        return RunnerConfig(
            keyword=keyword,
            container="accelerators",
            factory=Accelerator,
            decorators=[set_name, set_coords, is_deaccelerator],
            position=_component_position(defaults),
            critical=(set_name,),
        )

    return make


registry.register(RunnerStrategy("component", "elements", [
    positioned("component", "elements", extra=(set_evolve,)),
]))
registry.register(RunnerStrategy("anchor", "anchors", [
    positioned("anchor", "anchors", anchor=True),
]))
registry.register(RunnerStrategy("market", "markets", [
    positioned("market", "markets", extra=(set_evolve,)),
]))
registry.register(RunnerStrategy("ecosystem", "ecosystems", [
    positioned("ecosystem", "ecosystems", extra=(set_evolve,)),
]))
registry.register(RunnerStrategy("submap", "submaps", [
    positioned("submap", "submaps", extra=(set_ref, set_evolve)),
]))
registry.register(RunnerStrategy("accelerator", "accelerators", [
    _accelerator("accelerator"),
    _accelerator("deaccelerator"),
]))
