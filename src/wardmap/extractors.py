"""
Field extractors.

Each decorator reads one field out of a single (comment-stripped, trimmed)
line and writes it onto the element: `decorator(element, line, ctx) -> None`.
A decorator that cannot read its field writes the fallback value first and
then raises FieldError; the line-scan runner records the diagnostic and keeps
the element.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .config import DefaultsConfig
from .dom import Decorators, Label, Position
from .errors import FieldError

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_ESCAPE = re.compile(r'\\(["n\\])')
_UNESCAPED = {'"': '"', "n": "\n", "\\": "\\"}
_INERTIA = re.compile(r"(?<![\w-])inertia(?![\w-])")
_LABEL = re.compile(r"\blabel\s*\[([^\]]*)\]")
_EVOLVE_TAIL = re.compile(r"(?<![\w-])evolve\s+(.*)$")
_EVOLVE_MATURITY = re.compile(r"\s([0-9]?\.[0-9]+)")
_QUOTED_TEXT = re.compile(r'^"((?:[^"\\]|\\.)*)"\s*\[')
_REF = re.compile(r"url\(([^)]*)\)")
_METHOD_DECORATOR = re.compile(r"\([^)]*\b(build|buy|outsource)\b[^)]*\)")
_MARKET_DECORATOR = re.compile(r"\([^)]*\bmarket\b[^)]*\)")
_ECOSYSTEM_DECORATOR = re.compile(r"\([^)]*\becosystem\b[^)]*\)")


@dataclass
class DecoratorContext:
    """What a decorator knows about the line it is reading."""
    keyword: str
    position: Position = field(default_factory=Position)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)


Decorator = Callable[[Any, str, DecoratorContext], None]


# --- helpers ---------------------------------------------------------------

def parse_float(text: str) -> float | None:
    """Read a leading number the lenient way map text is written (`.38`, `0.5abc`)."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return None
    return float(match.group(0))


def format_coordinate(value: float) -> str:
    """Clamp to [0, 1] and render with two decimals."""
    return f"{min(max(value, 0.0), 1.0):.2f}"


def unescape_name(text: str) -> str:
    """Undo quoted-name escaping: \\" -> ", \\n -> newline, \\\\ -> \\."""
    return _ESCAPE.sub(lambda m: _UNESCAPED[m.group(1)], text)


def escape_name(name: str) -> str:
    return name.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def needs_quotes(name: str) -> bool:
    return any(ch in name for ch in ('\n', '"', "\\")) or name != name.strip()


def format_name(name: str) -> str:
    """Name as it must appear in map text, quoted and escaped when required."""
    if needs_quotes(name):
        return f'"{escape_name(name)}"'
    return name


def find_closing_quote(text: str, start: int) -> int:
    """Index of the first unescaped `"` at or after start, or -1."""
    i = start
    while i < len(text):
        if text[i] == '"':
            backslashes = 0
            j = i - 1
            while j >= 0 and text[j] == "\\":
                backslashes += 1
                j -= 1
            if backslashes % 2 == 0:
                return i
        i += 1
    return -1


def quoted_names_end(text: str) -> int:
    """
    Index just past the quoted names that open an evolve body: a quoted
    name, and a quoted `-> "override"` after either kind of name. 0 when
    neither name is quoted.
    """
    end = 0
    if text.startswith('"'):
        close = find_closing_quote(text, 1)
        if close == -1:
            return 0
        end = close + 1
    arrow = text.find("->", end)
    if arrow == -1:
        return end
    target = arrow + 2
    while target < len(text) and text[target].isspace():
        target += 1
    if text.startswith('"', target):
        close = find_closing_quote(text, target + 1)
        if close != -1:
            return close + 1
    return end


def after_keyword(line: str, keyword: str) -> str:
    """Text following the first `{keyword} ` on the line, trimmed."""
    marker = f"{keyword} "
    idx = line.find(marker)
    if idx == -1:
        return ""
    return line[idx + len(marker):].strip()


def split_name(text: str) -> tuple[str, str]:
    """
    Split `name [rest...` into (name, rest).

    A quoted name runs to its closing quote and is unescaped. An unquoted
    name runs to the first `[`.
    """
    if text.startswith('"'):
        end = find_closing_quote(text, 1)
        if end != -1:
            return unescape_name(text[1:end]), text[end + 1:]
        text = text[1:]
    idx = text.find("[")
    if idx == -1:
        return text.strip(), ""
    return text[:idx].strip(), text[idx:]


def remainder(line: str, keyword: str) -> str:
    """Everything after the element's name."""
    return split_name(after_keyword(line, keyword))[1]


def name_free(line: str, keyword: str) -> str:
    """After-keyword text with a quoted name removed (unquoted names stay)."""
    text = after_keyword(line, keyword)
    if text.startswith('"'):
        return split_name(text)[1]
    return text


def bracket_values(text: str) -> list[str] | None:
    """Comma separated contents of the first [ ] group, whitespace removed."""
    start = text.find("[")
    if start == -1:
        return None
    end = text.find("]", start)
    if end == -1:
        return None
    inner = re.sub(r"\s", "", text[start + 1:end])
    return inner.split(",")


def _read(values: list[str], index: int, fallback: float) -> tuple[float, bool]:
    if index >= len(values):
        return fallback, False
    value = parse_float(values[index])
    if value is None or not 0.0 <= value <= 1.0:
        return fallback, False
    return value, True


def extract_location(text: str, default: Position) -> Position:
    """`[visibility, maturity]` with per-axis fallback to default."""
    values = bracket_values(text)
    if values is None:
        return Position(default.visibility, default.maturity)
    visibility, _ = _read(values, 0, default.visibility)
    maturity, _ = _read(values, 1, default.maturity)
    return Position(visibility, maturity)


def extract_many_locations(text: str, default: tuple[float, float, float, float]) -> tuple[float, ...]:
    """`[v1, m1, v2, m2]` with per-value fallback to default."""
    values = bracket_values(text)
    if values is None:
        return default
    return tuple(_read(values, i, fallback)[0] for i, fallback in enumerate(default))


def extract_size(text: str, default: tuple[int, int]) -> tuple[int, int]:
    values = bracket_values(text)
    if values is None or len(values) < 2:
        return default
    width = parse_float(values[0])
    height = parse_float(values[1])
    return (
        int(width) if width is not None else default[0],
        int(height) if height is not None else default[1],
    )


# --- decorators --------------------------------------------------------------

def set_name(element: Any, line: str, ctx: DecoratorContext) -> None:
    name, _ = split_name(after_keyword(line, ctx.keyword))
    element.name = name
    if not name:
        raise FieldError(f"{ctx.keyword} has no name")


def set_coords(element: Any, line: str, ctx: DecoratorContext) -> None:
    rest = remainder(line, ctx.keyword)
    values = bracket_values(rest)
    if values is None:
        element.visibility = ctx.position.visibility
        element.maturity = ctx.position.maturity
        return
    element.visibility, vis_ok = _read(values, 0, ctx.position.visibility)
    element.maturity, mat_ok = _read(values, 1, ctx.position.maturity)
    if not (vis_ok and mat_ok):
        raise FieldError(
            f"Invalid coordinates [{', '.join(values)}], "
            f"using [{element.visibility}, {element.maturity}]"
        )


def set_many_coords(element: Any, line: str, ctx: DecoratorContext) -> None:
    rest = after_keyword(line, ctx.keyword)
    default = (0.9, 0.1, 0.8, 0.2)
    values = bracket_values(rest)
    box = extract_many_locations(rest, default)
    element.visibility1, element.maturity1, element.visibility2, element.maturity2 = box
    if values is not None and not all(_read(values, i, d)[1] for i, d in enumerate(default)):
        raise FieldError(f"Invalid bounding box [{', '.join(values)}]")


def set_label(element: Any, line: str, ctx: DecoratorContext) -> None:
    scale = getattr(element, "increase_label_spacing", 0) or 1
    element.label = Label(ctx.defaults.label_x * scale, ctx.defaults.label_y * scale)
    match = _LABEL.search(name_free(line, ctx.keyword))
    if match is None:
        return
    parts = re.sub(r"\s", "", match.group(1)).split(",")
    x = parse_float(parts[0]) if parts else None
    y = parse_float(parts[1]) if len(parts) > 1 else None
    if x is None or y is None:
        raise FieldError(f"Invalid label offset [{match.group(1)}]")
    element.label = Label(x, y)


def set_inertia(element: Any, line: str, ctx: DecoratorContext) -> None:
    element.inertia = _INERTIA.search(name_free(line, ctx.keyword)) is not None


def set_evolve(element: Any, line: str, ctx: DecoratorContext) -> None:
    element.evolving = False
    element.evolve_maturity = None
    match = _EVOLVE_TAIL.search(name_free(line, ctx.keyword))
    if match is None:
        return
    target = _INERTIA.sub("", match.group(1)).strip()
    value = parse_float(target)
    element.evolving = True
    if value is None or not 0.0 <= value <= 1.0:
        element.evolve_maturity = ctx.defaults.evolve_maturity
        raise FieldError(f"Invalid evolve maturity {target!r}, using {element.evolve_maturity}")
    element.evolve_maturity = value


def set_decorators(element: Any, line: str, ctx: DecoratorContext) -> None:
    decorators = Decorators()
    spacing = 0
    rest = name_free(line, ctx.keyword)

    method = _METHOD_DECORATOR.search(rest)
    if method is not None:
        setattr(decorators, method.group(1), True)
        spacing = 2
    if _MARKET_DECORATOR.search(rest) or ctx.keyword == "market":
        decorators.market = True
        spacing = 2
    if _ECOSYSTEM_DECORATOR.search(rest) or ctx.keyword == "ecosystem":
        decorators.ecosystem = True
        spacing = 3

    element.decorators = decorators
    element.increase_label_spacing = spacing


def set_url(element: Any, line: str, ctx: DecoratorContext) -> None:
    values = remainder(line, ctx.keyword)
    start = values.find("[")
    end = values.rfind("]")
    if start == -1 or end < start:
        raise FieldError("url has no [address]")
    element.url = values[start + 1:end].strip()


def set_ref(element: Any, line: str, ctx: DecoratorContext) -> None:
    match = _REF.search(name_free(line, ctx.keyword))
    if match is not None:
        element.url = match.group(1).strip()


def set_pipeline_maturity(element: Any, line: str, ctx: DecoratorContext) -> None:
    values = bracket_values(remainder(line, ctx.keyword))
    element.hidden = True
    element.maturity1, element.maturity2 = 0.2, 0.8
    if values is None or len(values) < 2:
        return
    element.maturity1, first_ok = _read(values, 0, 0.2)
    element.maturity2, second_ok = _read(values, 1, 0.8)
    element.hidden = False
    if not (first_ok and second_ok):
        raise FieldError(
            f"Invalid pipeline span [{', '.join(values)}], "
            f"using [{element.maturity1}, {element.maturity2}]"
        )


def set_pipeline_component_maturity(element: Any, line: str, ctx: DecoratorContext) -> None:
    element.maturity = ctx.defaults.pipeline_component_maturity
    values = bracket_values(remainder(line, ctx.keyword))
    if values is None:
        return
    value, ok = _read(values, 0, element.maturity)
    element.maturity = value
    if not ok:
        raise FieldError(f"Invalid pipeline component maturity [{values[0]}]")


def _strip_label(text: str) -> str:
    match = _LABEL.search(text)
    if match is None:
        return text
    return text[:match.start()]


def _evolve_body(line: str, ctx: DecoratorContext) -> tuple[str, float | None]:
    """
    Split `Name[->Override] 0.8 [label [x, y]]` into the names text and the
    trailing maturity. Quoted names are skipped before searching for the number,
    the label and `inertia`.
    """
    body = after_keyword(line, ctx.keyword)
    names_end = quoted_names_end(body)
    rest = _INERTIA.sub("", _strip_label(body[names_end:])).rstrip()
    value = None
    matches = list(_EVOLVE_MATURITY.finditer(" " + rest))
    if matches:
        last = matches[-1]
        value = float(last.group(1))
        rest = rest[:last.start()]
    return (body[:names_end] + rest).strip(), value


def set_evolve_names(element: Any, line: str, ctx: DecoratorContext) -> None:
    """`evolve Name[->Override] ...`: the evolving component and its new name."""
    name, override = _split_evolve_names(_evolve_body(line, ctx)[0])
    element.name = name
    element.override = override
    if not name:
        raise FieldError("evolve has no name")


def set_evolve_maturity(element: Any, line: str, ctx: DecoratorContext) -> None:
    value = _evolve_body(line, ctx)[1]
    element.maturity = ctx.defaults.evolve_maturity
    if value is None:
        return
    if not 0.0 <= value <= 1.0:
        raise FieldError(f"Invalid evolve maturity {value}, using {element.maturity}")
    element.maturity = value


def _split_evolve_names(text: str) -> tuple[str, str]:
    if text.startswith('"'):
        end = find_closing_quote(text, 1)
        if end != -1:
            name = unescape_name(text[1:end])
            rest = text[end + 1:].strip()
            return name, _override(rest)
    if "->" in text:
        name, _, rest = text.partition("->")
        return name.strip(), _override("->" + rest)
    return text, ""


def _override(rest: str) -> str:
    if not rest.startswith("->"):
        return ""
    target = rest[2:].strip()
    if target.startswith('"'):
        end = find_closing_quote(target, 1)
        if end != -1:
            return unescape_name(target[1:end])
    return target


def set_text(element: Any, line: str, ctx: DecoratorContext) -> None:
    rest = after_keyword(line, ctx.keyword)
    if rest.startswith('"'):
        match = _QUOTED_TEXT.match(rest)
        if match is not None:
            element.text = unescape_name(match.group(1))
            return
        end = find_closing_quote(rest, 1)
        if end != -1:
            element.text = unescape_name(rest[1:end])
            return
        element.text = rest[1:].split(" [")[0].strip()
        return
    if rest.startswith("["):
        element.text = ""
        return
    element.text = rest.split(" [")[0].strip()


def set_text_from_ending(element: Any, line: str, ctx: DecoratorContext) -> None:
    trimmed = line.strip()
    end = trimmed.rfind("]")
    element.text = trimmed[end + 1:].strip() if end != -1 else ""


def set_number(element: Any, line: str, ctx: DecoratorContext) -> None:
    token = after_keyword(line, ctx.keyword).split("[")[0].strip()
    try:
        element.number = int(token)
    except ValueError as e:
        element.number = 0
        raise FieldError(f"Invalid annotation number {token!r}") from e


def set_occurrences(element: Any, line: str, ctx: DecoratorContext) -> None:
    compact = re.sub(r"\s", "", line)
    default = Position(0.9, 0.1)
    if "[[" in compact:
        inner = compact.split("[[", 1)[1].split("]]", 1)[0]
        element.occurrences = [
            extract_location(f"[{pair}]", default) for pair in inner.split("],[")
        ]
    elif "[" in line and "]" in line:
        element.occurrences = [extract_location(line, default)]
    else:
        element.occurrences = []


def set_method(element: Any, line: str, ctx: DecoratorContext) -> None:
    name, _ = split_name(after_keyword(line, ctx.keyword))
    element.name = name
    element.method = ctx.keyword
    if not name:
        raise FieldError(f"{ctx.keyword} has no component name")


def is_deaccelerator(element: Any, line: str, ctx: DecoratorContext) -> None:
    element.deaccelerator = line.strip().startswith("deaccelerator")


def set_attitude(element: Any, line: str, ctx: DecoratorContext) -> None:
    element.kind = ctx.keyword
