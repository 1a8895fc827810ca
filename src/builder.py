"""Site build: render published posts with a publisher, incrementally.

State is a JSON file inside the format's output directory recording the
content hash each post was last built from, so unchanged posts are
skipped and unpublished posts have their output removed.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from postkit.config import PostkitConfig
from postkit.errors import FrontMatterError
from postkit.posts.models import BuildRecord, BuildState, Post
from postkit.posts.reader import PostReader, sort_key
from postkit.publishers import create_publisher

logger = logging.getLogger(__name__)

STATE_FILENAME = ".postkit-state.json"


@dataclass
class BuildResult:
    """What a build did, by slug."""

    output_dir: Path
    built: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# State I/O
# ---------------------------------------------------------------------------


def load_build_state(output_dir: Path) -> BuildState:
    """Load build state from disk.

    Returns empty BuildState if file doesn't exist or is corrupt.
    """
    state_path = output_dir / STATE_FILENAME
    if not state_path.exists():
        return BuildState()
    try:
        data = json.loads(state_path.read_text(encoding="utf-8"))
        return BuildState.model_validate(data)
    except (json.JSONDecodeError, ValueError, KeyError):
        logger.warning("Corrupt build state at %s, starting fresh", state_path)
        return BuildState()


def save_build_state(state: BuildState, output_dir: Path) -> None:
    """Save build state to disk."""
    state_path = output_dir / STATE_FILENAME
    state_path.parent.mkdir(parents=True, exist_ok=True)
    state_path.write_text(
        state.model_dump_json(indent=2),
        encoding="utf-8",
    )


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


def content_hash(post: Post) -> str:
    source = post.path.read_bytes()
    return hashlib.sha256(source).hexdigest()


def _read_posts(
    posts_dir: Path, pattern: str, result: BuildResult
) -> list[Post]:
    reader = PostReader(pattern)
    posts: list[Post] = []
    if not posts_dir.exists():
        logger.warning("Posts directory %s does not exist", posts_dir)
        return posts

    for path in sorted(posts_dir.glob(pattern)):
        if not path.is_file():
            continue
        try:
            posts.append(reader.read(path))
        except (FrontMatterError, OSError, UnicodeDecodeError) as exc:
            result.failed[path.stem] = str(exc)
            logger.warning("Cannot build %s: %s", path, exc)
    return posts


def build_site(
    config: PostkitConfig,
    *,
    output_dir: Path | None = None,
    fmt: str | None = None,
    force: bool = False,
    include_drafts: bool | None = None,
) -> BuildResult:
    """Render posts into ``<output_dir>/<fmt>/``.

    Args:
        config: Loaded configuration; explicit arguments override it.
        output_dir: Site root. Defaults to ``config.build.output_directory``.
        fmt: Output format name. Defaults to ``config.build.format``.
        force: Rebuild posts even when their content is unchanged.
        include_drafts: Also build posts whose ``published`` flag is not true.

    Returns:
        BuildResult listing built, skipped, removed and failed slugs.

    Raises:
        ValueError: If the format is unknown.
    """
    fmt = fmt or config.build.format
    publisher = create_publisher(fmt)
    site_dir = (output_dir or config.output_dir) / publisher.name
    if include_drafts is None:
        include_drafts = config.build.include_drafts

    result = BuildResult(output_dir=site_dir)
    state = load_build_state(site_dir)

    posts = _read_posts(config.posts_dir, config.posts.pattern, result)
    selected = [p for p in posts if include_drafts or p.published]
    selected.sort(key=sort_key, reverse=True)

    seen: dict[str, Path] = {}
    built_posts: list[Post] = []
    for post in selected:
        slug = post.slug
        if slug in seen:
            result.failed[post.path.stem] = (
                f"slug '{slug}' is already used by {seen[slug].name}"
            )
            logger.warning("Duplicate slug %s in %s", slug, post.path)
            continue
        seen[slug] = post.path
        built_posts.append(post)

        digest = content_hash(post)
        out_path = publisher.post_output_path(site_dir, post)
        if not force and state.is_current(slug, digest) and out_path.exists():
            result.skipped.append(slug)
            continue

        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(publisher.format_post(post), encoding="utf-8")
        state.mark_built(
            BuildRecord(
                slug=slug,
                source_path=str(post.path),
                content_hash=digest,
                built_at=datetime.now(),
                output_path=str(out_path),
            )
        )
        result.built.append(slug)
        logger.info("Built %s -> %s", post.path, out_path)

    for record in list(state.posts):
        if record.slug in seen:
            continue
        stale = Path(record.output_path)
        if stale.exists():
            stale.unlink()
        state.forget(record.slug)
        result.removed.append(record.slug)
        logger.info("Removed %s (no longer published)", record.slug)

    index_path = publisher.index_path(site_dir)
    index_path.parent.mkdir(parents=True, exist_ok=True)
    index_path.write_text(publisher.format_index(built_posts), encoding="utf-8")

    save_build_state(state, site_dir)
    return result
