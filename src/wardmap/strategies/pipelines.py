"""
Pipeline strategy.

Pipelines nest their child components textually under the `pipeline` line,
so this strategy reads the comment-stripped text with container bodies still
in place and scans forward from each pipeline line.

    pipeline Kettle
    {
      component Campfire Kettle [0.50] label [-29, 28]
      component Electric Kettle [0.63]
    }

With the new_pipelines feature off, children are the single-maturity
component lines that follow, up to the next pipeline line.
"""

from __future__ import annotations

import logging

from ..config import Config
from ..dom import ParseError, Pipeline, PipelineComponent
from ..extractors import (
    bracket_values,
    set_inertia,
    set_label,
    set_name,
    set_pipeline_component_maturity,
    set_pipeline_maturity,
)
from ..preprocess import split_lines
from ..runner import ExtractionResult, LineScanRunner, RunnerConfig
from .base import ExtractionStrategy, registry

logger = logging.getLogger(__name__)


class PipelineStrategy(ExtractionStrategy):
    """Pipelines and their child components."""

    reads_containers = True

    @property
    def name(self) -> str:
        return "pipeline"

    @property
    def containers(self) -> list[str]:
        return ["pipelines"]

    def extract(self, content: str, config: Config) -> ExtractionResult:
        header = LineScanRunner(RunnerConfig(
            keyword="pipeline",
            container="pipelines",
            factory=Pipeline,
            decorators=[set_name, set_pipeline_maturity, set_inertia],
            critical=(set_name,),
        ), config.defaults)
        child = LineScanRunner(RunnerConfig(
            keyword="component",
            container="components",
            factory=PipelineComponent,
            decorators=[set_name, set_pipeline_component_maturity, set_label],
            critical=(set_name,),
        ), config.defaults)

        lines = split_lines(content)
        pipelines: list[Pipeline] = []
        errors: list[ParseError] = []

        for i, raw in enumerate(lines):
            line = raw.strip()
            if not header.qualifies(line):
                continue
            opened = line.endswith("{")
            if opened:
                line = line[:-1].rstrip()
            pipeline = header.build(line, i + 1, errors)
            if pipeline is None:
                continue

            for j in self._child_lines(lines, i, opened, config.features.new_pipelines):
                component = child.build(lines[j].strip(), j + 1, errors)
                if component is None:
                    continue
                component.id = f"{i + 1}-{j}"
                pipeline.components.append(component)

            if pipeline.components:
                maturities = [c.maturity for c in pipeline.components]
                pipeline.maturity1 = min(maturities)
                pipeline.maturity2 = max(maturities)
                pipeline.hidden = False
            logger.debug("pipeline %r: %d components", pipeline.name, len(pipeline.components))
            pipelines.append(pipeline)

        return ExtractionResult(fields={"pipelines": pipelines}, errors=errors)

    def _child_lines(self, lines: list[str], start: int, opened: bool, new_pipelines: bool) -> list[int]:
        """0-based indexes of the child component lines of the pipeline at start."""
        children: list[int] = []
        depth = 1 if opened else 0

        for j in range(start + 1, len(lines)):
            text = lines[j].strip()

            if depth == 0:
                if not text:
                    continue
                if text.startswith("{"):
                    depth = 1
                    continue
                if new_pipelines or text.startswith("pipeline "):
                    break
                if _is_legacy_child(text):
                    children.append(j)
                continue

            if text.startswith("}"):
                break
            depth += text.count("{") - text.count("}")
            if text.startswith("component "):
                children.append(j)

        return children


def _is_legacy_child(text: str) -> bool:
    """`component Name [0.5]`: a component line with a single maturity value."""
    if not text.startswith("component "):
        return False
    values = bracket_values(text)
    return values is not None and len(values) == 1


registry.register(PipelineStrategy())
