"""
DOM - map model for wardmap

Every parse rebuilds these records from scratch; nothing here is mutated to
change a map. Edits go through the text mutators and a fresh parse.

Key invariant: names are the only cross-reference key. Links, evolve
statements, methods and pipelines point at components by name, and the first
component with a given name wins.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

STYLES = ("plain", "wardley", "colour")
ATTITUDES = ("pioneers", "settlers", "townplanners")
METHODS = ("build", "buy", "outsource")


@dataclass
class Label:
    """Label offset relative to the element, in screen units."""
    x: float = 5
    y: float = -10


@dataclass
class Position:
    visibility: float = 0.9
    maturity: float = 0.1


@dataclass
class Size:
    width: int = 0
    height: int = 0


@dataclass
class Decorators:
    build: bool = False
    buy: bool = False
    outsource: bool = False
    market: bool = False
    ecosystem: bool = False


@dataclass
class ParseError:
    """A diagnostic for one line of map text (1-based line number)."""
    line: int
    message: str
    severity: str = "warning"  # warning | critical | error


@dataclass
class Element:
    """Shared base: external id and 1-based line number."""
    id: str = ""
    line: int = 0

    @property
    def source_line(self) -> int:
        """0-based index into the (preprocessed) map text."""
        return self.line - 1


@dataclass
class PositionedElement(Element):
    """component, anchor, market, ecosystem or submap."""
    kind: str = "component"
    name: str = ""
    visibility: float = 0.9
    maturity: float = 0.1
    label: Label = field(default_factory=Label)
    inertia: bool = False
    evolving: bool = False
    evolve_maturity: float | None = None
    url: str | None = None
    decorators: Decorators = field(default_factory=Decorators)
    increase_label_spacing: int = 0
    placeholder: bool = False  # synthesized for a line that could not be read


@dataclass
class EvolvedElement(Element):
    """Target of an `evolve` statement, linked to its source by name."""
    name: str = ""
    maturity: float = 0.85
    label: Label = field(default_factory=Label)
    override: str = ""
    increase_label_spacing: int = 0


@dataclass
class PipelineComponent(Element):
    name: str = ""
    maturity: float = 0.2
    visibility: float = 0.0
    label: Label = field(default_factory=Label)


@dataclass
class Pipeline(Element):
    name: str = ""
    visibility: float = 0.0
    maturity1: float = 0.2
    maturity2: float = 0.8
    hidden: bool = True
    inertia: bool = False
    components: list[PipelineComponent] = field(default_factory=list)


@dataclass
class Link(Element):
    start: str = ""
    end: str = ""
    flow: bool = False
    flow_value: str | None = None
    future: bool = False
    past: bool = False
    context: str | None = None


@dataclass
class Annotation(Element):
    number: int = 0
    occurrences: list[Position] = field(default_factory=list)
    text: str = ""


@dataclass
class Note(Element):
    text: str = ""
    visibility: float = 0.9
    maturity: float = 0.1


@dataclass
class Attitude(Element):
    """PST region: a bounding box tagged pioneers, settlers or townplanners."""
    kind: str = "pioneers"
    visibility1: float = 0.9
    maturity1: float = 0.1
    visibility2: float = 0.8
    maturity2: float = 0.2
    text: str = ""


@dataclass
class Accelerator(Element):
    name: str = ""
    visibility: float = 0.9
    maturity: float = 0.1
    deaccelerator: bool = False


@dataclass
class Method(Element):
    """`build X`, `buy X` or `outsource X` statement."""
    name: str = ""
    method: str = "build"


@dataclass
class Url(Element):
    name: str = ""
    url: str = ""


@dataclass
class EvolutionLabel:
    primary: str
    secondary: str = ""


def default_evolution() -> list[EvolutionLabel]:
    return [
        EvolutionLabel("Genesis"),
        EvolutionLabel("Custom Built"),
        EvolutionLabel("Product", "(+rental)"),
        EvolutionLabel("Commodity", "(+utility)"),
    ]


@dataclass
class Presentation:
    style: str = "plain"
    size: Size = field(default_factory=Size)
    annotations_anchor: Position = field(default_factory=Position)


@dataclass
class MapDocument:
    """Root parse result."""
    title: str = "Untitled Map"
    presentation: Presentation = field(default_factory=Presentation)
    evolution: list[EvolutionLabel] = field(default_factory=default_evolution)
    elements: list[PositionedElement] = field(default_factory=list)
    anchors: list[PositionedElement] = field(default_factory=list)
    markets: list[PositionedElement] = field(default_factory=list)
    ecosystems: list[PositionedElement] = field(default_factory=list)
    submaps: list[PositionedElement] = field(default_factory=list)
    pipelines: list[Pipeline] = field(default_factory=list)
    evolved: list[EvolvedElement] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    urls: list[Url] = field(default_factory=list)
    attitudes: list[Attitude] = field(default_factory=list)
    accelerators: list[Accelerator] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    diagnostics: list[ParseError] = field(default_factory=list)

    def all_components(self) -> Iterator[PositionedElement]:
        """Every positioned element, in a fixed kind order."""
        yield from self.elements
        yield from self.anchors
        yield from self.markets
        yield from self.ecosystems
        yield from self.submaps

    def name_index(self) -> dict[str, PositionedElement]:
        """name -> element, first occurrence wins."""
        index: dict[str, PositionedElement] = {}
        for element in self.all_components():
            index.setdefault(element.name, element)
        return index

    def find(self, name: str) -> PositionedElement | None:
        return self.name_index().get(name)
