"""Blog post files: front matter, content checks, and lifecycle.

A post is a Markdown file that opens with a YAML front-matter block
(``layout``, ``title``, ``published``) followed by the body text.
"""

from postkit.posts.checks import (
    check_directory,
    check_duplicates,
    check_file,
    check_front_matter,
    check_markdown,
    check_text,
)
from postkit.posts.frontmatter import (
    parse_front_matter,
    render_front_matter,
    set_front_matter_value,
    split_front_matter,
)
from postkit.posts.models import (
    BuildRecord,
    BuildState,
    CheckReport,
    FileReport,
    Issue,
    IssueCode,
    Post,
    Severity,
)
from postkit.posts.reader import PostReader
from postkit.posts.services import create_post, set_published, slugify

__all__ = [
    "BuildRecord",
    "BuildState",
    "CheckReport",
    "FileReport",
    "Issue",
    "IssueCode",
    "Post",
    "PostReader",
    "Severity",
    "check_directory",
    "check_duplicates",
    "check_file",
    "check_front_matter",
    "check_markdown",
    "check_text",
    "create_post",
    "parse_front_matter",
    "render_front_matter",
    "set_front_matter_value",
    "set_published",
    "slugify",
    "split_front_matter",
]
