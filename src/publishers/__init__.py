"""Site publisher factory and registry."""

from __future__ import annotations

from enum import StrEnum

from postkit.publishers.base import PostPublisher


class OutputFormat(StrEnum):
    """Available site output formats."""

    HTML = "html"
    MARKDOWN = "markdown"


def create_publisher(fmt: OutputFormat | str) -> PostPublisher:
    """Create a publisher for the given output format.

    Raises:
        ValueError: If the format is unknown.
    """
    if isinstance(fmt, str):
        fmt = OutputFormat(fmt)

    from postkit.publishers.html import HtmlPublisher
    from postkit.publishers.markdown import MarkdownPublisher

    publishers: dict[OutputFormat, PostPublisher] = {
        OutputFormat.HTML: HtmlPublisher(),
        OutputFormat.MARKDOWN: MarkdownPublisher(),
    }

    if fmt in publishers:
        return publishers[fmt]

    raise ValueError(f"Unknown format: {fmt!r}")
