"""
Integration tests for CLI.
"""

import io
import json
from pathlib import Path

import pytest

from wardmap.cli import main, parse_args, read_input


FIXTURES = Path(__file__).parent.parent / "fixtures"
COFFEE = str(FIXTURES / "coffee.owm")


class TestParseArgs:
    def test_parse_defaults(self):
        args = parse_args(["parse"])
        assert args.command == "parse"
        assert args.file is None
        assert args.diagnostics
        assert not args.verbose

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_size(self):
        args = parse_args(["size", "800", "600", "map.owm"])
        assert (args.width, args.height, args.file) == (800, 600, "map.owm")

    def test_style_choices(self):
        with pytest.raises(SystemExit):
            parse_args(["style", "neon"])

    def test_evolution_file_option(self):
        args = parse_args(["evolution", "A", "B", "C", "D", "--file", "map.owm"])
        assert args.stages == ["A", "B", "C", "D"]
        assert args.file == "map.owm"

    def test_rename_line(self):
        args = parse_args(["rename", "Kettle", "Stove", "--line", "11"])
        assert (args.old, args.new, args.line) == ("Kettle", "Stove", 11)


class TestReadInput:
    def test_file(self):
        assert read_input(COFFEE).startswith("title Campfire Coffee Shop")

    def test_stdin(self, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("title From Stdin"))
        assert read_input(None) == "title From Stdin"


class TestMain:
    def test_parse_json(self, capsys):
        exit_code = main(["parse", COFFEE])
        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["title"] == "Campfire Coffee Shop"
        assert data["presentation"]["style"] == "wardley"
        assert [p["name"] for p in data["pipelines"]] == ["Kettle"]
        assert "diagnostics" in data

    def test_parse_without_diagnostics(self, capsys):
        main(["parse", "--no-diagnostics", COFFEE])
        assert "diagnostics" not in json.loads(capsys.readouterr().out)

    def test_strip(self, capsys):
        assert main(["strip", COFFEE]) == 0
        out = capsys.readouterr().out
        assert "//" not in out
        assert "/*" not in out
        assert len(out.split("\n")) == len(read_input(COFFEE).split("\n"))

    def test_title_from_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("component A [0.1, 0.2]"))
        assert main(["title", "My Map"]) == 0
        assert capsys.readouterr().out == "title My Map\ncomponent A [0.1, 0.2]"

    def test_move(self, capsys):
        assert main(["move", "Cup", "0.7", "0.8", COFFEE]) == 0
        assert "component Cup [0.70, 0.80]" in capsys.readouterr().out.split("\n")

    def test_move_by_line(self, capsys):
        assert main(["move", "7", "0.7", "0.8", COFFEE]) == 0
        assert "component Cup [0.70, 0.80]" in capsys.readouterr().out.split("\n")

    def test_evolve(self, capsys):
        assert main(["evolve", "Power", "0.95", COFFEE]) == 0
        assert "evolve Power 0.95 label [-12, 21]" in capsys.readouterr().out

    def test_delete(self, capsys):
        assert main(["delete", "Kettle", COFFEE]) == 0
        out = capsys.readouterr().out
        assert "Kettle->Power" not in out

    def test_rename(self, capsys):
        assert main(["rename", "Kettle", "Stove", COFFEE]) == 0
        out = capsys.readouterr().out.split("\n")
        assert "pipeline Stove" in out
        assert "build Stove" in out

    def test_unlink(self, capsys):
        assert main(["unlink", "Hot Water", "Water", COFFEE]) == 0
        out = capsys.readouterr().out.split("\n")
        assert "Hot Water->Water" not in out
        assert "Hot Water->Kettle; boiling" in out

    def test_context(self, capsys):
        assert main(["context", "Kettle", "Power", "mains", COFFEE]) == 0
        assert "Kettle->Power;mains" in capsys.readouterr().out.split("\n")

    def test_place(self, capsys):
        assert main(["place", "0.5", "0.4", "--name", "Kettle", COFFEE]) == 0
        assert capsys.readouterr().out.split("\n")[-1] == "component Kettle 1 [0.50, 0.40]"

    def test_place_off_the_map(self, capsys):
        assert main(["place", "1.5", "0.4", COFFEE]) == 1
        assert "between 0 and 1" in capsys.readouterr().err

    def test_evolution(self, capsys):
        assert main(["evolution", "A", "B", "C", "D", "--file", COFFEE]) == 0
        assert "evolution A->B->C->D" in capsys.readouterr().out

    def test_file_not_found(self, capsys):
        assert main(["parse", "nonexistent.owm"]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_mutator_error(self, capsys):
        assert main(["size", "10", "10", COFFEE]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: Width must be between")

    def test_unknown_target(self, capsys):
        assert main(["delete", "Teapot", COFFEE]) == 1
        assert 'Component with ID "Teapot" not found' in capsys.readouterr().err
