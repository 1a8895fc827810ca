"""Post lifecycle operations: create, publish, unpublish."""

from __future__ import annotations

import logging
import re
import unicodedata
from datetime import date
from pathlib import Path

from postkit.errors import PostExistsError
from postkit.posts.frontmatter import render_front_matter, set_front_matter_value
from postkit.posts.models import Post

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = "post"


def slugify(title: str) -> str:
    """Turn a title into a lowercase, hyphenated file-name slug."""
    text = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9\s-]", "", text.lower())
    text = re.sub(r"[\s-]+", "-", text).strip("-")
    return text[:80].rstrip("-") or "post"


def set_published(target: Post | Path, published: bool) -> bool:
    """Set the ``published`` flag of a post file.

    Only the ``published`` line is rewritten; the rest of the file is left
    byte-for-byte intact.

    Returns:
        True if the file changed.

    Raises:
        FrontMatterError: If the file has no well-formed front matter.
    """
    path = target.path if isinstance(target, Post) else target
    # newline="" keeps CRLF files intact on rewrite
    with open(path, encoding="utf-8", newline="") as f:
        text = f.read()

    updated = set_front_matter_value(text, "published", published, path)
    if updated == text:
        logger.debug("%s already has published=%s", path, published)
        return False

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(updated)
    logger.info("Set published=%s on %s", published, path)
    return True


def create_post(
    directory: Path,
    title: str,
    *,
    layout: str = DEFAULT_LAYOUT,
    post_date: date | None = None,
) -> Path:
    """Write a new unpublished post named ``YYYY-MM-DD-<slug>.md``.

    Raises:
        PostExistsError: If a file with that name already exists.
    """
    post_date = post_date or date.today()
    path = directory / f"{post_date.isoformat()}-{slugify(title)}.md"
    if path.exists():
        raise PostExistsError(f"Post already exists: {path}")

    directory.mkdir(parents=True, exist_ok=True)
    fm = render_front_matter({"layout": layout, "title": title, "published": False})
    path.write_text(fm + "\n", encoding="utf-8")
    logger.info("Created %s", path)
    return path
