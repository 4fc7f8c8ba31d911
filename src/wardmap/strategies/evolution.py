"""
Evolve statements and build/buy/outsource methods.

Both refer to a component by name; the model builder resolves them.
"""

from __future__ import annotations

from ..config import DefaultsConfig
from ..dom import METHODS, EvolvedElement, Method
from ..extractors import set_evolve_maturity, set_evolve_names, set_label, set_method
from ..runner import RunnerConfig
from .base import RunnerStrategy, registry


def _evolve(defaults: DefaultsConfig) -> RunnerConfig:
    return RunnerConfig(
        keyword="evolve",
        container="evolved",
        factory=EvolvedElement,
        decorators=[set_evolve_names, set_evolve_maturity, set_label],
        critical=(set_evolve_names,),
    )


def _method(keyword: str):
    def make(defaults: DefaultsConfig) -> RunnerConfig:
        return RunnerConfig(
            keyword=keyword,
            container="methods",
            factory=Method,
            decorators=[set_method],
            critical=(set_method,),
        )

    return make


registry.register(RunnerStrategy("evolve", "evolved", [_evolve]))
registry.register(RunnerStrategy("method", "methods", [_method(m) for m in METHODS]))
