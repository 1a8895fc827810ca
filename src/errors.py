"""Exceptions raised by postkit library code.

The CLI catches ``PostkitError`` and reports it; everything below it is
meant to be raised, not swallowed.
"""

from __future__ import annotations

from pathlib import Path


class PostkitError(Exception):
    """Base class for all postkit errors."""


class FrontMatterError(PostkitError):
    """A post's front-matter block is missing or malformed."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        path: Path | None = None,
        line: int | None = None,
    ) -> None:
        self.reason = message
        self.code = code
        self.path = path
        self.line = line
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{location}{message}")


class PostNotFoundError(PostkitError):
    """No post matches the requested slug or path."""


class PostExistsError(PostkitError):
    """Refusing to overwrite an existing post file."""
