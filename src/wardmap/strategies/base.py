"""
Base extraction strategy interface and registry.

Each strategy handles one DSL construct and owns one or more output
containers of the merged map record. The registry keeps them by name so the
converter can run them in a fixed order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from ..config import Config, DefaultsConfig
from ..runner import ExtractionResult, LineScanRunner, RunnerConfig


class ExtractionStrategy(ABC):
    """Base class for per-construct extractors."""

    # True when the strategy needs { } container bodies left in place
    reads_containers: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name used for ordering in the converter."""
        ...

    @property
    @abstractmethod
    def containers(self) -> list[str]:
        """Keys this strategy contributes to the merged record."""
        ...

    @abstractmethod
    def extract(self, content: str, config: Config) -> ExtractionResult:
        """
        Extract this construct from preprocessed map text.
        Must not raise for malformed input; problems go into errors.
        """
        ...


class RunnerStrategy(ExtractionStrategy):
    """
    Strategy made of one or more line-scan runs sharing a container.

    Several keywords may feed the same container (`build`/`buy`/`outsource`
    all produce methods); elements are merged in line order.
    """

    def __init__(self, name: str, container: str,
                 configs: list[Callable[[DefaultsConfig], RunnerConfig]]):
        self._name = name
        self._container = container
        self._configs = configs

    @property
    def name(self) -> str:
        return self._name

    @property
    def containers(self) -> list[str]:
        return [self._container]

    def extract(self, content: str, config: Config) -> ExtractionResult:
        elements = []
        errors = []
        for make_config in self._configs:
            result = LineScanRunner(make_config(config.defaults), config.defaults).run(content)
            elements.extend(result.fields.get(self._container, []))
            errors.extend(result.errors)
        elements.sort(key=lambda e: e.line)
        errors.sort(key=lambda e: e.line)
        return ExtractionResult(fields={self._container: elements}, errors=errors)


class StrategyRegistry:
    """Registry of extraction strategies by name."""

    def __init__(self):
        self._strategies: list[ExtractionStrategy] = []
        self._by_name: dict[str, ExtractionStrategy] = {}

    def register(self, strategy: ExtractionStrategy) -> None:
        """Register a strategy. Re-registering a name replaces it."""
        if strategy.name in self._by_name:
            self._strategies.remove(self._by_name[strategy.name])
        self._strategies.append(strategy)
        self._by_name[strategy.name] = strategy

    def get_by_name(self, name: str) -> ExtractionStrategy | None:
        return self._by_name.get(name)

    def ordered(self, names: list[str]) -> list[ExtractionStrategy]:
        """Strategies for the given names, in that order, skipping unknown names."""
        return [self._by_name[n] for n in names if n in self._by_name]

    @property
    def strategies(self) -> list[ExtractionStrategy]:
        """List all registered strategies."""
        return list(self._strategies)


# Global registry instance
registry = StrategyRegistry()
