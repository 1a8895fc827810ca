"""Static HTML publisher: one page per post plus an index page."""

from __future__ import annotations

from html import escape
from pathlib import Path
from urllib.parse import quote

import markdown as md

from postkit.posts.models import Post
from postkit.publishers.base import PostPublisher

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]

PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
</head>
<body>
{content}
</body>
</html>
"""


class HtmlPublisher(PostPublisher):
    """Renders post bodies with Python-Markdown into standalone pages."""

    name = "html"

    def render_body(self, post: Post) -> str:
        return md.markdown(post.body, extensions=MARKDOWN_EXTENSIONS, output_format="html")

    def format_post(self, post: Post) -> str:
        title = escape(post.title or post.slug)
        parts = [f'<article class="post layout-{escape(post.layout or "default")}">']
        parts.append(f"<h1>{title}</h1>")
        if post.date is not None:
            iso = post.date.isoformat()
            parts.append(f'<time datetime="{iso}">{post.date.strftime("%B %d, %Y")}</time>')
        parts.append(self.render_body(post))
        parts.append("</article>")
        return PAGE_TEMPLATE.format(title=title, content="\n".join(parts))

    def post_output_path(self, output_dir: Path, post: Post) -> Path:
        return output_dir / "posts" / f"{post.slug}.html"

    def format_index(self, posts: list[Post]) -> str:
        lines = ["<h1>Posts</h1>", "<ul>"]
        for post in posts:
            title = escape(post.title or post.slug)
            date_str = post.date.isoformat() if post.date else ""
            lines.append(
                f'<li><a href="posts/{escape(quote(post.slug))}.html">{title}</a>'
                + (f" <small>{date_str}</small>" if date_str else "")
                + "</li>"
            )
        lines.append("</ul>")
        return PAGE_TEMPLATE.format(title="Posts", content="\n".join(lines))

    def index_path(self, output_dir: Path) -> Path:
        return output_dir / "index.html"
