"""
Data model contract tests.

These pin down defaults and lookups that every strategy and the model
builder rely on.
"""

from wardmap.dom import (
    Attitude,
    EvolutionLabel,
    Link,
    MapDocument,
    Note,
    ParseError,
    Pipeline,
    PositionedElement,
    Presentation,
    default_evolution,
)


class TestDefaults:
    def test_positioned_element(self):
        element = PositionedElement(name="A")
        assert (element.visibility, element.maturity) == (0.9, 0.1)
        assert (element.label.x, element.label.y) == (5, -10)
        assert not element.evolving
        assert element.evolve_maturity is None
        assert element.increase_label_spacing == 0

    def test_labels_are_not_shared(self):
        a, b = PositionedElement(), PositionedElement()
        a.label.x = 40
        assert b.label.x == 5

    def test_pipeline(self):
        pipeline = Pipeline(name="P")
        assert (pipeline.maturity1, pipeline.maturity2, pipeline.hidden) == (0.2, 0.8, True)
        assert pipeline.components == []

    def test_link(self):
        link = Link(start="A", end="B")
        assert not (link.flow or link.future or link.past)
        assert link.context is None

    def test_overlays(self):
        assert (Note().visibility, Note().maturity) == (0.9, 0.1)
        box = Attitude()
        assert (box.visibility1, box.maturity1, box.visibility2, box.maturity2) == (0.9, 0.1, 0.8, 0.2)

    def test_presentation(self):
        presentation = Presentation()
        assert presentation.style == "plain"
        assert (presentation.size.width, presentation.size.height) == (0, 0)

    def test_evolution(self):
        assert default_evolution()[2] == EvolutionLabel("Product", "(+rental)")
        assert default_evolution()[3] == EvolutionLabel("Commodity", "(+utility)")

    def test_parse_error(self):
        assert ParseError(3, "bad").severity == "warning"


class TestMapDocument:
    def setup_method(self):
        self.doc = MapDocument(
            elements=[PositionedElement(id="1", line=1, name="A"), PositionedElement(id="2", line=2, name="A")],
            anchors=[PositionedElement(id="3", line=3, kind="anchor", name="User")],
            submaps=[PositionedElement(id="4", line=4, kind="submap", name="Sub")],
        )

    def test_all_components_order(self):
        assert [e.id for e in self.doc.all_components()] == ["1", "2", "3", "4"]

    def test_first_name_wins(self):
        assert self.doc.find("A").id == "1"
        assert self.doc.find("User").kind == "anchor"
        assert self.doc.find("Missing") is None

    def test_source_line(self):
        assert self.doc.elements[1].source_line == 1

    def test_empty_document(self):
        doc = MapDocument()
        assert doc.title == "Untitled Map"
        assert list(doc.all_components()) == []
