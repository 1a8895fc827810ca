"""Discovers and reads post files from a posts directory."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from postkit.errors import FrontMatterError, PostNotFoundError
from postkit.posts.frontmatter import parse_front_matter
from postkit.posts.models import Post

logger = logging.getLogger(__name__)


def sort_key(post: Post) -> tuple[date, str]:
    return (post.date or date.min, post.slug)


class PostReader:
    """Reads post files into ``Post`` models."""

    def __init__(self, pattern: str = "*.md") -> None:
        self.pattern = pattern

    def read(self, path: Path) -> Post:
        """Read a single post file.

        Raises:
            FrontMatterError: If the front matter is missing or malformed.
        """
        text = path.read_text(encoding="utf-8")
        data, body, body_line = parse_front_matter(text, path)
        return Post(path=path, front_matter=data, body=body, body_line=body_line)

    def read_all(self, directory: Path) -> list[Post]:
        """Read every post in a directory, newest first.

        Files that cannot be parsed are logged and skipped.
        """
        if not directory.exists():
            return []

        posts: list[Post] = []
        for path in sorted(directory.glob(self.pattern)):
            if not path.is_file():
                continue
            try:
                posts.append(self.read(path))
            except (FrontMatterError, OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping %s: %s", path, exc)

        posts.sort(key=sort_key, reverse=True)
        return posts

    def find(self, directory: Path, slug_or_path: str) -> Post:
        """Find a post by slug, file name, or path.

        Raises:
            PostNotFoundError: If nothing matches.
        """
        candidate = Path(slug_or_path)
        if candidate.suffix and candidate.is_file():
            return self.read(candidate)
        if (directory / candidate).is_file():
            return self.read(directory / candidate)

        for post in self.read_all(directory):
            if slug_or_path in (post.slug, post.path.stem):
                return post

        raise PostNotFoundError(f"No post matching {slug_or_path!r} in {directory}")
