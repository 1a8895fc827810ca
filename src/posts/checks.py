"""Content checks for post files.

Three families of checks run on every file: the front-matter block is
well formed, ``published`` is a real boolean, and the Markdown body has
no structural breakage (unclosed fences, broken links). Duplicate titles
and bodies are flagged across a whole directory.
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Any

from postkit.config import CheckSectionConfig
from postkit.errors import FrontMatterError, PostkitError
from postkit.posts.frontmatter import parse_front_matter, split_front_matter
from postkit.posts.models import (
    CheckReport,
    FileReport,
    Issue,
    IssueCode,
    Post,
    Severity,
)

logger = logging.getLogger(__name__)

FENCE_OPEN_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
HEADING_NO_SPACE_RE = re.compile(r"^ {0,3}#{1,6}[^#\s]")
INLINE_CODE_RE = re.compile(r"(`+)(.+?)\1")
LINK_OPEN_RE = re.compile(r"\]\(")
KEY_LINE_RE = re.compile(r"""^(?P<quote>["']?)(?P<key>[^\s#:'"-][^:]*?)(?P=quote)[ \t]*:(?:\s|$)""")


def _error(code: IssueCode, message: str, line: int | None = None) -> Issue:
    return Issue(code=code, severity=Severity.ERROR, message=message, line=line)


def _warning(code: IssueCode, message: str, line: int | None = None) -> Issue:
    return Issue(code=code, severity=Severity.WARNING, message=message, line=line)


# ---------------------------------------------------------------------------
# Front matter
# ---------------------------------------------------------------------------


def key_lines(raw: str, start_line: int) -> dict[str, int]:
    """Map each top-level front-matter key to its file line number."""
    lines: dict[str, int] = {}
    for offset, line in enumerate(raw.split("\n")):
        match = KEY_LINE_RE.match(line)
        if match:
            lines.setdefault(match.group("key").strip(), start_line + offset)
    return lines


def check_front_matter(
    data: dict[str, Any],
    config: CheckSectionConfig,
    lines: dict[str, int] | None = None,
) -> list[Issue]:
    """Check parsed front matter for required keys and value types."""
    lines = lines or {}
    issues: list[Issue] = []

    for key in config.required_keys:
        if key not in data:
            issues.append(_error(IssueCode.MISSING_KEY, f"missing required key '{key}'"))

    if "title" in data:
        title = data["title"]
        if not isinstance(title, str) or not title.strip():
            issues.append(
                _error(
                    IssueCode.EMPTY_TITLE,
                    "title must be a non-empty string",
                    lines.get("title"),
                )
            )

    if "published" in data and not isinstance(data["published"], bool):
        issues.append(
            _error(
                IssueCode.PUBLISHED_NOT_BOOLEAN,
                f"published must be true or false, got {data['published']!r}",
                lines.get("published"),
            )
        )

    if config.layouts and "layout" in data and data["layout"] not in config.layouts:
        allowed = ", ".join(config.layouts)
        issues.append(
            _warning(
                IssueCode.UNKNOWN_LAYOUT,
                f"layout {data['layout']!r} is not one of: {allowed}",
                lines.get("layout"),
            )
        )

    return issues


# ---------------------------------------------------------------------------
# Markdown body
# ---------------------------------------------------------------------------


def _closes_fence(line: str, fence: str) -> bool:
    stripped = line.strip()
    if len(line) - len(line.lstrip(" ")) > 3:
        return False
    return len(stripped) >= len(fence) and set(stripped) == {fence[0]}


def check_markdown(body: str, body_line: int = 1) -> list[Issue]:
    """Check a Markdown body for structural problems.

    Code inside fenced blocks and inline code spans is not inspected.
    Line numbers are file lines, offset by ``body_line``.
    """
    issues: list[Issue] = []

    if not body.strip():
        issues.append(_warning(IssueCode.EMPTY_BODY, "post has no body text", body_line))
        return issues

    fence: str | None = None
    fence_line = 0

    for offset, line in enumerate(body.split("\n")):
        lineno = body_line + offset

        if fence is not None:
            if _closes_fence(line, fence):
                fence = None
            continue

        match = FENCE_OPEN_RE.match(line)
        if match:
            fence = match.group(1)
            fence_line = lineno
            continue

        if HEADING_NO_SPACE_RE.match(line):
            issues.append(
                _warning(
                    IssueCode.HEADING_MISSING_SPACE,
                    "heading marker is not followed by a space",
                    lineno,
                )
            )

        text = INLINE_CODE_RE.sub("", line)
        for link in LINK_OPEN_RE.finditer(text):
            rest = text[link.end():]
            if ")" not in rest:
                issues.append(
                    _error(IssueCode.UNCLOSED_LINK, "link target is never closed with ')'", lineno)
                )
                break
            if not rest.split(")", 1)[0].strip():
                issues.append(
                    _warning(IssueCode.EMPTY_LINK_TARGET, "link has an empty target", lineno)
                )

    if fence is not None:
        issues.append(
            _error(
                IssueCode.UNCLOSED_CODE_FENCE,
                f"code fence '{fence}' is never closed",
                fence_line,
            )
        )

    return issues


# ---------------------------------------------------------------------------
# Files and directories
# ---------------------------------------------------------------------------


def check_text(text: str, path: Path, config: CheckSectionConfig | None = None) -> FileReport:
    """Run every per-file check on already-loaded text."""
    config = config or CheckSectionConfig()
    report = FileReport(path=path)

    try:
        data, body, body_line = parse_front_matter(text, path)
    except FrontMatterError as exc:
        report.issues.append(_error(IssueCode(exc.code), exc.reason, exc.line))
        return report

    block = split_front_matter(text, path)
    report.issues.extend(
        check_front_matter(data, config, key_lines(block.raw, block.start_line))
    )
    if config.markdown:
        report.issues.extend(check_markdown(body, body_line))

    report.post = Post(path=path, front_matter=data, body=body, body_line=body_line)
    return report


def check_file(path: Path, config: CheckSectionConfig | None = None) -> FileReport:
    """Check one post file. Read failures become an ``unreadable`` issue."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return FileReport(
            path=path,
            issues=[_error(IssueCode.UNREADABLE, f"could not read file: {exc}")],
        )
    return check_text(text, path, config)


def _body_fingerprint(body: str) -> str:
    normalised = " ".join(body.split())
    return hashlib.sha256(normalised.encode("utf-8")).hexdigest()


def check_duplicates(reports: list[FileReport]) -> None:
    """Flag posts that share a title or an identical body.

    Issues are appended to the reports in place.
    """
    by_title: dict[str, list[FileReport]] = defaultdict(list)
    by_body: dict[str, list[FileReport]] = defaultdict(list)

    for report in reports:
        if report.post is None:
            continue
        title = report.post.title.strip().casefold()
        if title:
            by_title[title].append(report)
        if report.post.body.strip():
            by_body[_body_fingerprint(report.post.body)].append(report)

    for group in by_title.values():
        if len(group) < 2:
            continue
        for report in group:
            others = ", ".join(r.path.name for r in group if r is not report)
            report.issues.append(
                _warning(IssueCode.DUPLICATE_TITLE, f"title is also used by {others}")
            )

    for group in by_body.values():
        if len(group) < 2:
            continue
        for report in group:
            others = ", ".join(r.path.name for r in group if r is not report)
            report.issues.append(
                _warning(IssueCode.DUPLICATE_BODY, f"body is identical to {others}")
            )


def check_directory(
    directory: Path,
    config: CheckSectionConfig | None = None,
    pattern: str = "*.md",
) -> CheckReport:
    """Check every post file in a directory.

    Raises:
        PostkitError: If the directory does not exist.
    """
    config = config or CheckSectionConfig()
    if not directory.is_dir():
        raise PostkitError(f"Posts directory not found: {directory}")

    files = sorted(p for p in directory.glob(pattern) if p.is_file())
    logger.debug("Checking %d file(s) in %s", len(files), directory)

    reports = [check_file(path, config) for path in files]
    if config.duplicates:
        check_duplicates(reports)

    return CheckReport(files=reports)
