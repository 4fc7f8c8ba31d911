"""
Unit tests for placing new elements.
"""

import pytest

from wardmap.converter import parse
from wardmap.errors import InvalidInputError
from wardmap.mutators.placement import append_line, element_line, place_element, unique_name


class TestUniqueName:
    def test_free_name_unchanged(self):
        assert unique_name("Tea", ["Cup"]) == "Tea"

    def test_counts_up(self):
        assert unique_name("Tea", ["Tea", "Tea 1"]) == "Tea 2"

    def test_trims_base(self):
        assert unique_name("  Tea ", []) == "Tea"

    def test_gives_up(self):
        with pytest.raises(InvalidInputError, match="after 2 attempts"):
            unique_name("Tea", ["Tea", "Tea 1", "Tea 2"], max_attempts=2)

    def test_empty_base(self):
        with pytest.raises(InvalidInputError, match="non-empty"):
            unique_name(" ", [])


class TestLines:
    def test_component(self):
        assert element_line("component", "Tea", 0.5, 0.25) == "component Tea [0.50, 0.25]"

    def test_name_needing_quotes(self):
        assert element_line("anchor", "Two\nLines", 0.9, 0.5) == 'anchor "Two\\nLines" [0.90, 0.50]'

    def test_note_drops_brackets(self):
        assert element_line("note", "see [1]", 0.4, 0.6) == "note see 1 [0.40, 0.60]"

    def test_note_quoted(self):
        assert element_line("note", 'say "hi"', 0.4, 0.6) == 'note "say \\"hi\\"" [0.40, 0.60]'

    def test_append_trims(self):
        assert append_line("title T\n\n", "component A [0.10, 0.20]") == "title T\ncomponent A [0.10, 0.20]"

    def test_append_to_empty(self):
        assert append_line("", " component A [0.10, 0.20] ") == "component A [0.10, 0.20]"

    def test_append_empty_line(self):
        with pytest.raises(InvalidInputError, match="non-empty"):
            append_line("title T", " ")


class TestPlaceElement:
    def test_default_name(self, coffee_map):
        placement = place_element(coffee_map, 0.5, 0.4)
        assert placement.name == "New Component"
        assert placement.text.split("\n")[-1] == "component New Component [0.50, 0.40]"
        assert placement.line == len(coffee_map.strip().split("\n")) + 1

    def test_name_clash_gets_a_number(self, coffee_map):
        placement = place_element(coffee_map, 0.5, 0.4, base_name="Kettle")
        assert placement.name == "Kettle 1"
        assert parse(placement.text).find("Kettle 1") is not None

    def test_commented_declarations_do_not_count(self):
        placement = place_element("// component Tea [0.1, 0.2]", 0.3, 0.4, base_name="Tea")
        assert placement.name == "Tea"

    def test_whitespace_collapsed_in_name(self):
        placement = place_element("", 0.3, 0.4, base_name="Hot\nWater")
        assert (placement.name, placement.text) == ("Hot Water", "component Hot Water [0.30, 0.40]")

    def test_market(self):
        placement = place_element("title T", 0.3, 0.4, keyword="market")
        assert placement.text == "title T\nmarket New Market [0.30, 0.40]"
        assert placement.line == 2

    def test_note_text_not_renamed(self):
        text = "note hello [0.1, 0.2]"
        placement = place_element(text, 0.3, 0.4, keyword="note", base_name="hello")
        assert placement.text == "note hello [0.1, 0.2]\nnote hello [0.30, 0.40]"

    @pytest.mark.parametrize("visibility, maturity", [(-0.1, 0.5), (0.5, 1.2)])
    def test_position_must_be_on_the_map(self, visibility, maturity):
        with pytest.raises(InvalidInputError, match="between 0 and 1"):
            place_element("", visibility, maturity)

    def test_position_must_be_a_number(self):
        with pytest.raises(InvalidInputError, match="valid number"):
            place_element("", "0.5", 0.5)

    def test_unknown_keyword(self):
        with pytest.raises(InvalidInputError, match="Cannot place"):
            place_element("", 0.5, 0.5, keyword="pipeline")

    def test_forbidden_name(self):
        with pytest.raises(InvalidInputError, match="may not contain"):
            place_element("", 0.5, 0.5, base_name="A->B")
