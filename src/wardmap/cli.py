"""
CLI interface for wardmap.

Pipe-friendly: reads map text from a file or stdin, writes JSON (parse) or
the rewritten map text (every other command) to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from .config import get_config
from .converter import parse
from .dom import STYLES
from .errors import MapTextError
from .mutators.deletion import delete_component
from .mutators.links import delete_link, update_link_context
from .mutators.placement import PLACEABLE, place_element
from .mutators.positions import update_evolve_maturity, update_position
from .mutators.properties import update_evolution_stages, update_size, update_style, update_title
from .mutators.rename import rename_component
from .preprocess import strip_comments


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="wardmap",
        description="Parse and edit Wardley map text",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log parser and mutator activity to stderr",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    def command(name: str, summary: str) -> argparse.ArgumentParser:
        return sub.add_parser(name, help=summary)

    def with_file(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        p.add_argument("file", nargs="?", help="Map file (reads from stdin if not provided)")
        return p

    p = with_file(command("parse", "Print the parsed map as JSON"))
    p.add_argument("--no-diagnostics", action="store_false", dest="diagnostics", default=True,
                   help="Leave diagnostics out of the output")

    with_file(command("strip", "Remove comments, keeping line numbers"))

    p = command("title", "Set the map title")
    p.add_argument("value")
    with_file(p)

    p = command("style", "Set the map style")
    p.add_argument("value", choices=STYLES)
    with_file(p)

    p = command("size", "Set the map size")
    p.add_argument("width", type=int)
    p.add_argument("height", type=int)
    with_file(p)

    p = command("evolution", "Set the four evolution stage names")
    p.add_argument("stages", nargs=4, metavar="STAGE")
    p.add_argument("--file", dest="file", help="Map file (reads from stdin if not provided)")

    p = command("delete", "Delete a component and the lines that refer to it")
    p.add_argument("identifier", help="1-based line number, generated id or name")
    p.add_argument("--type", dest="expected_type", help="Only match this keyword")
    with_file(p)

    p = command("move", "Move an element")
    p.add_argument("target", help="1-based line number or name")
    p.add_argument("visibility", type=float)
    p.add_argument("maturity", type=float)
    p.add_argument("--keyword", help="Only match this keyword")
    with_file(p)

    p = command("evolve", "Change the evolve maturity of a component")
    p.add_argument("name")
    p.add_argument("maturity", type=float)
    with_file(p)

    p = command("unlink", "Delete a link")
    p.add_argument("start")
    p.add_argument("end")
    p.add_argument("--flow", action="store_true", help="Only match flow links")
    p.add_argument("--flow-value", help="Only match flows carrying this value")
    with_file(p)

    p = command("context", "Set or clear the context of a link")
    p.add_argument("start")
    p.add_argument("end")
    p.add_argument("text", help="New context (empty to remove it)")
    with_file(p)

    p = command("place", "Add a new element at a position")
    p.add_argument("visibility", type=float)
    p.add_argument("maturity", type=float)
    p.add_argument("--keyword", default="component", choices=PLACEABLE)
    p.add_argument("--name", help="Base name (note text for notes)")
    with_file(p)

    p = command("rename", "Rename a component and its references")
    p.add_argument("old")
    p.add_argument("new")
    p.add_argument("--line", type=int, help="1-based line of the declaration")
    with_file(p)

    return parser.parse_args(args)


def read_input(filepath: str | None) -> str:
    """Read map text from file or stdin."""
    if filepath:
        with open(filepath, encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


def run(parsed: argparse.Namespace, text: str) -> str:
    """Execute one command against map text, returning what to print."""
    command = parsed.command

    if command == "parse":
        doc = parse(text, get_config())
        data = asdict(doc)
        if not parsed.diagnostics:
            data.pop("diagnostics")
        return json.dumps(data, indent=2) + "\n"
    if command == "strip":
        return strip_comments(text)
    if command == "title":
        return update_title(text, parsed.value).text
    if command == "style":
        return update_style(text, parsed.value).text
    if command == "size":
        return update_size(text, parsed.width, parsed.height).text
    if command == "evolution":
        return update_evolution_stages(text, parsed.stages).text
    if command == "delete":
        return delete_component(text, parsed.identifier, parsed.expected_type).text
    if command == "move":
        target: str | int = int(parsed.target) if parsed.target.isdigit() else parsed.target
        return update_position(text, target, parsed.visibility, parsed.maturity, parsed.keyword)
    if command == "evolve":
        return update_evolve_maturity(text, parsed.name, parsed.maturity)
    if command == "rename":
        return rename_component(text, parsed.old, parsed.new, parsed.line)
    if command == "unlink":
        return delete_link(text, parsed.start, parsed.end, parsed.flow, parsed.flow_value)
    if command == "context":
        return update_link_context(text, parsed.start, parsed.end, parsed.text)
    if command == "place":
        return place_element(text, parsed.visibility, parsed.maturity, parsed.keyword, parsed.name).text
    raise ValueError(f"Unknown command {command!r}")


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format="%(levelname)s %(name)s: %(message)s")

    try:
        text = read_input(parsed.file)
    except FileNotFoundError:
        print(f"Error: File not found: {parsed.file}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    try:
        output = run(parsed, text)
    except MapTextError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
