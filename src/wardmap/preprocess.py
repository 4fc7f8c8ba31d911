"""
Line-count-preserving preprocessing of map text.

Both passes only blank or truncate line content; they never add or remove
lines, so a 0-based index into the output is a valid index into the input.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PreprocessedText:
    """Two views of the same map text, both with the original line count."""
    stripped: str  # comments removed
    flattened: str  # comments removed and { } container bodies blanked


def split_lines(text: str) -> list[str]:
    """Split on newline only, keeping a trailing empty line."""
    return text.split("\n")


def _code_spans(text: str) -> list[tuple[str, list[tuple[int, int]]]]:
    """Each line with the (start, end) spans of it that are not comment."""
    in_block = False
    result: list[tuple[str, list[tuple[int, int]]]] = []

    for line in split_lines(text):
        if not in_block and line.strip().startswith("url"):
            result.append((line, [(0, len(line))]))
            continue

        spans: list[tuple[int, int]] = []
        pos = 0
        while pos < len(line):
            if in_block:
                end = line.find("*/", pos)
                if end == -1:
                    break
                pos = end + 2
                in_block = False
                continue

            line_comment = line.find("//", pos)
            block_start = line.find("/*", pos)
            if line_comment != -1 and (block_start == -1 or line_comment < block_start):
                spans.append((pos, line_comment))
                break
            if block_start != -1:
                spans.append((pos, block_start))
                pos = block_start + 2
                in_block = True
                continue
            spans.append((pos, len(line)))
            break

        result.append((line, spans))

    return result


def strip_comments(text: str) -> str:
    """
    Remove `//` line comments and `/* */` block comments.

    Lines whose trimmed content starts with `url` keep their `//` (URLs).
    Lines inside a block comment become empty. After a closing `*/`,
    processing continues with the remainder of that line.
    """
    return "\n".join(
        "".join(line[start:end] for start, end in spans)
        for line, spans in _code_spans(text)
    )


def mask_comments(text: str) -> str:
    """
    Like strip_comments, but comment characters become spaces.

    Every line keeps its length, so a column in the output is the same
    column in the input. Mutators locate edits on this view and apply them
    to the raw text.
    """
    out: list[str] = []
    for line, spans in _code_spans(text):
        chars = [" "] * len(line)
        for start, end in spans:
            chars[start:end] = line[start:end]
        out.append("".join(chars))
    return "\n".join(out)


def blank_containers(text: str) -> str:
    """
    Blank `{ ... }` container bodies (pipeline children).

    A container opens on a line whose trimmed content starts with `{`, or on
    a line that ends with `{` (the brace is removed, the rest of that line is
    kept). Everything through the matching `}` becomes empty.
    """
    out: list[str] = []
    depth = 0

    for line in split_lines(text):
        stripped = line.strip()

        if depth == 0:
            if stripped.startswith("{"):
                depth = max(stripped.count("{") - stripped.count("}"), 0)
                out.append("")
                continue
            if stripped.endswith("{"):
                depth = 1
                out.append(line[:line.rfind("{")].rstrip())
                continue
            out.append(line)
            continue

        depth += stripped.count("{") - stripped.count("}")
        depth = max(depth, 0)
        out.append("")

    return "\n".join(out)


def preprocess(text: str, blank: bool = True) -> PreprocessedText:
    stripped = strip_comments(text)
    flattened = blank_containers(stripped) if blank else stripped
    return PreprocessedText(stripped=stripped, flattened=flattened)
