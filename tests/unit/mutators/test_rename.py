"""
Unit tests for component rename.
"""

import pytest

from wardmap.converter import parse
from wardmap.errors import InvalidInputError, LineOutOfRangeError, TargetNotFoundError
from wardmap.mutators.rename import rename_component, validate_name


class TestRenameComponent:
    def setup_method(self):
        self.text = "\n".join([
            "component Kettle [0.45, 0.57] label [-33, -16]",
            "component Power [0.10, 0.70]",
            "pipeline Kettle",
            "{",
            "  component Electric Kettle [0.63]",
            "}",
            "evolve Kettle->Smart Kettle 0.8",
            "Hot Water->Kettle; boiling",
            "Kettle+'£1'>Power // metered",
            "build Kettle",
            "Kettle Stand->Power",
        ])

    def test_rewrites_every_reference(self):
        lines = rename_component(self.text, "Kettle", "Stove").split("\n")
        assert lines == [
            "component Stove [0.45, 0.57] label [-33, -16]",
            "component Power [0.10, 0.70]",
            "pipeline Stove",
            "{",
            "  component Electric Kettle [0.63]",
            "}",
            "evolve Stove->Smart Kettle 0.8",
            "Hot Water->Stove; boiling",
            "Stove+'£1'>Power // metered",
            "build Stove",
            "Kettle Stand->Power",
        ]

    def test_rename_evolve_target(self):
        text = "component A [0.1, 0.2]\ncomponent B [0.3, 0.4]\nevolve A->B 0.8"
        lines = rename_component(text, "B", "C").split("\n")
        assert lines[1] == "component C [0.3, 0.4]"
        assert lines[2] == "evolve A->C 0.8"

    def test_new_name_is_quoted_when_needed(self):
        text = rename_component(self.text, "Power", "Grid\nPower")
        lines = text.split("\n")
        assert lines[1] == 'component "Grid\\nPower" [0.10, 0.70]'
        assert lines[8] == "Kettle+'£1'>\"Grid\\nPower\" // metered"
        doc = parse(text)
        assert doc.elements[1].name == "Grid\nPower"
        assert {link.end for link in doc.links} >= {"Grid\nPower"}

    def test_renames_quoted_declaration(self):
        text = 'component "Old One" [0.1, 0.2]\n"Old One"->X'
        assert rename_component(text, "Old One", "New") == "component New [0.1, 0.2]\nNew->X"

    def test_comments_around_a_link_survive(self):
        text = "component A [0.1, 0.2]\n/* c */ A->B // tail"
        assert rename_component(text, "A", "Z") == "component Z [0.1, 0.2]\n/* c */ Z->B // tail"

    def test_block_comment_before_declared_name(self):
        text = "component /* old */ A [0.1, 0.2]"
        assert rename_component(text, "A", "B") == "component /* old */ B [0.1, 0.2]"

    def test_evolve_target_with_trailing_comment(self):
        text = "component A [0.1, 0.2]\ncomponent B [0.3, 0.4]\nevolve A->B 0.8 // next"
        assert rename_component(text, "B", "C").split("\n")[2] == "evolve A->C 0.8 // next"

    def test_line_number(self):
        text = "component A [0.1, 0.2]\ncomponent A [0.3, 0.4]"
        assert rename_component(text, "A", "B", line_number=2) == "component A [0.1, 0.2]\ncomponent B [0.3, 0.4]"

    def test_wrong_line_number(self):
        with pytest.raises(TargetNotFoundError, match="not declared on line 2"):
            rename_component(self.text, "Kettle", "Stove", line_number=2)
        with pytest.raises(LineOutOfRangeError):
            rename_component(self.text, "Kettle", "Stove", line_number=40)

    def test_unknown_name(self):
        with pytest.raises(TargetNotFoundError):
            rename_component(self.text, "Teapot", "Stove")


class TestValidateName:
    def test_strips(self):
        assert validate_name("  Stove ") == "Stove"

    @pytest.mark.parametrize("name", ["A->B", "A[1]", "A;B", "A+>B", "A+<B"])
    def test_forbidden(self, name):
        with pytest.raises(InvalidInputError, match="may not contain"):
            validate_name(name)

    def test_empty(self):
        with pytest.raises(InvalidInputError, match="non-empty"):
            validate_name("")
