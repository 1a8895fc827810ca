"""Plain markdown publisher for GitHub Pages and repositories."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import quote

from postkit.posts.frontmatter import render_front_matter
from postkit.posts.models import Post
from postkit.publishers.base import PostPublisher


class MarkdownPublisher(PostPublisher):
    """Formats posts as plain markdown with minimal frontmatter."""

    name = "markdown"

    def format_post(self, post: Post) -> str:
        fm: dict[str, object] = {"title": post.title or post.slug}
        if post.date is not None:
            fm["date"] = post.date
        return render_front_matter(fm) + "\n" + post.body.strip() + "\n"

    def post_output_path(self, output_dir: Path, post: Post) -> Path:
        return output_dir / "posts" / f"{post.slug}.md"

    def format_index(self, posts: list[Post]) -> str:
        lines: list[str] = [
            "# Blog",
            "",
        ]
        for post in posts:
            title = post.title or post.slug
            entry = f"- [{title}](posts/{quote(post.slug)}.md)"
            if post.date is not None:
                entry += f" ({post.date.isoformat()})"
            lines.append(entry)
        lines.append("")
        return "\n".join(lines)

    def index_path(self, output_dir: Path) -> Path:
        return output_dir / "README.md"
