"""Base class for site output formats."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from postkit.posts.models import Post


class PostPublisher(ABC):
    """Base class for rendering posts into a publishable site."""

    name: str = ""

    @abstractmethod
    def format_post(self, post: Post) -> str:
        """Render a single post for this format."""

    @abstractmethod
    def post_output_path(self, output_dir: Path, post: Post) -> Path:
        """Compute the output file path for a post."""

    @abstractmethod
    def format_index(self, posts: list[Post]) -> str:
        """Generate an index page listing the given posts."""

    @abstractmethod
    def index_path(self, output_dir: Path) -> Path:
        """Compute the output file path for the index."""
