"""
Document level strategies: title, presentation, evolution axis labels, urls.

For single-valued properties the first matching line wins, which is the
same line the property mutators rewrite.
"""

from __future__ import annotations

import logging
import re

from ..config import Config, DefaultsConfig
from ..dom import STYLES, EvolutionLabel, ParseError, Position, Presentation, Size, Url, default_evolution
from ..extractors import extract_location, extract_size, set_name, set_url
from ..preprocess import split_lines
from ..runner import ExtractionResult, RunnerConfig
from .base import ExtractionStrategy, RunnerStrategy, registry

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Map"

_TITLE = re.compile(r"^title\s+(.+)$")


class TitleStrategy(ExtractionStrategy):

    @property
    def name(self) -> str:
        return "title"

    @property
    def containers(self) -> list[str]:
        return ["title"]

    def extract(self, content: str, config: Config) -> ExtractionResult:
        for raw in split_lines(content):
            match = _TITLE.match(raw.strip())
            if match is not None:
                return ExtractionResult(fields={"title": match.group(1).strip()})
        return ExtractionResult(fields={"title": DEFAULT_TITLE})


class PresentationStrategy(ExtractionStrategy):
    """`style`, `size` and `annotations` lines."""

    @property
    def name(self) -> str:
        return "presentation"

    @property
    def containers(self) -> list[str]:
        return ["presentation"]

    def extract(self, content: str, config: Config) -> ExtractionResult:
        presentation = Presentation()
        errors: list[ParseError] = []
        seen: set[str] = set()

        for i, raw in enumerate(split_lines(content)):
            line = raw.strip()
            keyword = line.split(" ", 1)[0]
            if keyword not in ("style", "size", "annotations") or keyword in seen:
                continue
            seen.add(keyword)

            if keyword == "style":
                style = line[len("style"):].strip()
                if style in STYLES:
                    presentation.style = style
                else:
                    errors.append(ParseError(i + 1, f"Unknown style {style!r}, using plain"))
            elif keyword == "size":
                width, height = extract_size(line, (0, 0))
                presentation.size = Size(width, height)
            else:
                presentation.annotations_anchor = extract_location(line, Position())

        return ExtractionResult(fields={"presentation": presentation}, errors=errors)


class EvolutionLabelsStrategy(ExtractionStrategy):
    """`evolution Genesis->Custom->Product|(+rental)->Commodity`."""

    @property
    def name(self) -> str:
        return "evolution"

    @property
    def containers(self) -> list[str]:
        return ["evolution"]

    def extract(self, content: str, config: Config) -> ExtractionResult:
        for i, raw in enumerate(split_lines(content)):
            line = raw.strip()
            if not line.startswith("evolution "):
                continue
            stages = line[len("evolution "):].split("->")
            labels = parse_stages(stages)
            errors = []
            if len(stages) != 4:
                errors.append(ParseError(i + 1, f"Expected 4 evolution stages, found {len(stages)}"))
            return ExtractionResult(fields={"evolution": labels}, errors=errors)
        return ExtractionResult(fields={"evolution": default_evolution()})


def parse_stages(stages: list[str]) -> list[EvolutionLabel]:
    """Four labels; missing or blank stages keep their default."""
    labels = default_evolution()
    for index, stage in enumerate(stages[:4]):
        primary, _, secondary = stage.partition("|")
        if primary.strip():
            labels[index] = EvolutionLabel(primary.strip(), secondary.strip())
    return labels


def _url(defaults: DefaultsConfig) -> RunnerConfig:
    return RunnerConfig(
        keyword="url",
        container="urls",
        factory=Url,
        decorators=[set_name, set_url],
        critical=(set_name,),
    )


registry.register(TitleStrategy())
registry.register(PresentationStrategy())
registry.register(EvolutionLabelsStrategy())
registry.register(RunnerStrategy("url", "urls", [_url]))
