"""Reading and rewriting the front-matter block of a post file.

A post starts with a line that is exactly ``---``. The block runs until
the next ``---`` line (or ``...``, the YAML document end marker) and is
parsed as YAML. Everything after the closing line is the Markdown body.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from postkit.errors import FrontMatterError

BOM = "\ufeff"
DELIMITER = "---"
END_MARKERS = ("---", "...")

_TOP_LEVEL_KEY_RE = r"""^(?P<quote>["']?){key}(?P=quote)[ \t]*:(?=[ \t]|\r?\n|$)"""
_COMMENT_RE = re.compile(r"[ \t]+#.*$")


@dataclass
class FrontMatterBlock:
    """Raw pieces of a post file."""

    raw: str
    body: str
    # 1-based line of the first front-matter line after the opening delimiter
    start_line: int
    # 1-based line of the first body line
    body_line: int


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, keeping line endings.

    ``str.splitlines`` also breaks on U+2028, form feeds and other
    separators, which puts line numbers out of step with the file.
    """
    return [line for line in re.split(r"(?<=\n)", text) if line]


def split_front_matter(text: str, path: Path | None = None) -> FrontMatterBlock:
    """Split a post into its raw front-matter text and body.

    Raises:
        FrontMatterError: ``missing-front-matter`` when the file does not
            open with a delimiter line, ``unterminated-front-matter`` when
            the block is never closed.
    """
    text = text.removeprefix(BOM)
    lines = split_lines(text)

    if not lines or lines[0].rstrip() != DELIMITER:
        raise FrontMatterError(
            "file does not start with a '---' front-matter delimiter",
            code="missing-front-matter",
            path=path,
            line=1,
        )

    for index in range(1, len(lines)):
        if lines[index].rstrip() in END_MARKERS:
            return FrontMatterBlock(
                raw="".join(lines[1:index]),
                body="".join(lines[index + 1 :]),
                start_line=2,
                body_line=index + 2,
            )

    raise FrontMatterError(
        "front-matter block opened on line 1 is never closed",
        code="unterminated-front-matter",
        path=path,
        line=1,
    )


def parse_front_matter(
    text: str, path: Path | None = None
) -> tuple[dict[str, Any], str, int]:
    """Parse the front matter of a post.

    Returns:
        ``(mapping, body, body_line)``. An empty block yields ``{}``.

    Raises:
        FrontMatterError: On a missing or unterminated block, invalid YAML,
            or YAML that is not a mapping.
    """
    block = split_front_matter(text, path)

    try:
        data = yaml.safe_load(block.raw)
    except yaml.YAMLError as exc:
        line = block.start_line
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            line = block.start_line + mark.line
        problem = getattr(exc, "problem", None) or str(exc)
        raise FrontMatterError(
            f"front matter is not valid YAML: {problem}",
            code="invalid-yaml",
            path=path,
            line=line,
        ) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"front matter must be key-value pairs, got {type(data).__name__}",
            code="not-a-mapping",
            path=path,
            line=block.start_line,
        )

    return {str(k): v for k, v in data.items()}, block.body, block.body_line


def render_front_matter(data: dict[str, Any]) -> str:
    """Render a mapping as a front-matter block, keys in insertion order."""
    if not data:
        return f"{DELIMITER}\n{DELIMITER}\n"
    dumped = yaml.safe_dump(
        data,
        allow_unicode=True,
        sort_keys=False,
        default_flow_style=False,
        width=1000,
    )
    return f"{DELIMITER}\n{dumped}{DELIMITER}\n"


def _scalar(value: Any) -> str:
    dumped = yaml.safe_dump(value, default_flow_style=True, width=1000)
    # safe_dump terminates plain scalars with a document end marker
    return dumped.removesuffix("\n...\n").strip()


def _trailing_comment(rest: str) -> str:
    """Return the ``  # comment`` suffix of a value, skipping quoted text."""
    start = 0
    stripped = rest.lstrip()
    if stripped[:1] in ("'", '"'):
        quote = stripped[0]
        index = len(rest) - len(stripped) + 1
        while index < len(rest):
            char = rest[index]
            if quote == '"' and char == "\\":
                index += 2
                continue
            if char == quote:
                # '' is an escaped quote inside a single-quoted scalar
                if quote == "'" and rest[index + 1 : index + 2] == "'":
                    index += 2
                    continue
                break
            index += 1
        start = index + 1
    match = _COMMENT_RE.search(rest, start)
    return match.group(0) if match else ""


def set_front_matter_value(
    text: str, key: str, value: Any, path: Path | None = None
) -> str:
    """Set one top-level key, leaving every other byte of the file alone.

    A quoted key keeps its quotes and a trailing ``# comment`` is kept.
    The key is appended just before the closing delimiter when absent.

    Raises:
        FrontMatterError: When the file has no well-formed block.
    """
    had_bom = text.startswith(BOM)
    block = split_front_matter(text, path)
    lines = split_lines(text.removeprefix(BOM))

    newline = "\r\n" if lines[0].endswith("\r\n") else "\n"
    scalar = _scalar(value)
    closing = block.body_line - 2
    pattern = re.compile(_TOP_LEVEL_KEY_RE.format(key=re.escape(key)))

    for index in range(1, closing):
        match = pattern.match(lines[index])
        if match:
            quote = match.group("quote")
            comment = _trailing_comment(lines[index][match.end() :].rstrip("\r\n"))
            lines[index] = f"{quote}{key}{quote}: {scalar}{comment}{newline}"
            # Drop an indented or list continuation of the old value
            end = index + 1
            while end < closing and lines[end][:1] in (" ", "\t", "-"):
                end += 1
            del lines[index + 1 : end]
            break
    else:
        lines.insert(closing, f"{key}: {scalar}{newline}")

    result = "".join(lines)
    return BOM + result if had_bom else result
