"""Pure data models for blog posts.

All Pydantic models and enums live here. No I/O, no business logic.
Services import from this module; this module only imports from stdlib
and third-party packages.
"""

from __future__ import annotations

import contextlib
import re
from datetime import date, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

FILENAME_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})-(.+)$")

# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


class Post(BaseModel):
    """A parsed post file: front matter plus Markdown body."""

    path: Path
    front_matter: dict[str, Any] = Field(default_factory=dict)
    body: str = ""
    body_line: int = 1

    @property
    def title(self) -> str:
        value = self.front_matter.get("title")
        return value if isinstance(value, str) else ""

    @property
    def layout(self) -> str:
        value = self.front_matter.get("layout")
        return value if isinstance(value, str) else ""

    @property
    def published(self) -> bool:
        """Only a real boolean ``true`` counts as published."""
        return self.front_matter.get("published") is True

    @property
    def slug(self) -> str:
        stem = self.path.stem
        match = FILENAME_DATE_RE.match(stem)
        return match.group(2) if match else stem

    @property
    def date(self) -> date | None:
        value = self.front_matter.get("date")
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            with contextlib.suppress(ValueError):
                return date.fromisoformat(value.strip()[:10])

        match = FILENAME_DATE_RE.match(self.path.stem)
        if match:
            with contextlib.suppress(ValueError):
                return date.fromisoformat(match.group(1))
        return None

    @property
    def word_count(self) -> int:
        return len(self.body.split())


# ---------------------------------------------------------------------------
# Check results
# ---------------------------------------------------------------------------


class Severity(StrEnum):
    """How bad an issue is."""

    ERROR = "error"
    WARNING = "warning"


class IssueCode(StrEnum):
    """Stable identifiers for every check."""

    UNREADABLE = "unreadable"
    MISSING_FRONT_MATTER = "missing-front-matter"
    UNTERMINATED_FRONT_MATTER = "unterminated-front-matter"
    INVALID_YAML = "invalid-yaml"
    NOT_A_MAPPING = "not-a-mapping"
    MISSING_KEY = "missing-key"
    EMPTY_TITLE = "empty-title"
    UNKNOWN_LAYOUT = "unknown-layout"
    PUBLISHED_NOT_BOOLEAN = "published-not-boolean"
    UNCLOSED_CODE_FENCE = "unclosed-code-fence"
    UNCLOSED_LINK = "unclosed-link"
    EMPTY_LINK_TARGET = "empty-link-target"
    HEADING_MISSING_SPACE = "heading-missing-space"
    EMPTY_BODY = "empty-body"
    DUPLICATE_TITLE = "duplicate-title"
    DUPLICATE_BODY = "duplicate-body"


class Issue(BaseModel):
    """A single problem found in a post file."""

    code: IssueCode
    severity: Severity
    message: str
    line: int | None = None


class FileReport(BaseModel):
    """All issues found in one file."""

    path: Path
    issues: list[Issue] = Field(default_factory=list)
    post: Post | None = None

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors


class CheckReport(BaseModel):
    """Result of checking a set of post files."""

    files: list[FileReport] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(len(f.errors) for f in self.files)

    @property
    def warning_count(self) -> int:
        return sum(len(f.warnings) for f in self.files)

    def failed(self, strict: bool = False) -> bool:
        """True when any file has errors, or any issue at all in strict mode."""
        if strict:
            return self.error_count + self.warning_count > 0
        return self.error_count > 0


# ---------------------------------------------------------------------------
# Build state
# ---------------------------------------------------------------------------


class BuildRecord(BaseModel):
    """Record of a post rendered into the site."""

    slug: str
    source_path: str
    content_hash: str
    built_at: datetime
    output_path: str = ""


class BuildState(BaseModel):
    """Tracks which posts have been built and from what content."""

    posts: list[BuildRecord] = Field(default_factory=list)

    def get(self, slug: str) -> BuildRecord | None:
        return next((p for p in self.posts if p.slug == slug), None)

    def is_current(self, slug: str, content_hash: str) -> bool:
        """Check if a post was already built from identical content."""
        record = self.get(slug)
        return record is not None and record.content_hash == content_hash

    def mark_built(self, record: BuildRecord) -> None:
        """Record that a post was built.

        Replaces any existing record with the same slug.
        """
        self.posts = [p for p in self.posts if p.slug != record.slug]
        self.posts.append(record)

    def forget(self, slug: str) -> None:
        self.posts = [p for p in self.posts if p.slug != slug]
