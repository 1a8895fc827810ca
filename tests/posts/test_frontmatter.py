"""Tests for front-matter splitting, parsing, and in-place rewriting."""

import pytest

from postkit.errors import FrontMatterError
from postkit.posts.frontmatter import (
    parse_front_matter,
    render_front_matter,
    set_front_matter_value,
    split_front_matter,
)

SAMPLE_POST = """\
---
layout: post
title: "Designing REST endpoints in Swift"
published: true
---

Every endpoint starts with a question: what does the client need?

```swift
let url = URL(string: "https://example.com/api/users")!
```
"""


class TestSplitFrontMatter:
    def test_splits_raw_and_body(self):
        block = split_front_matter(SAMPLE_POST)
        assert block.raw.startswith("layout: post\n")
        assert block.raw.endswith("published: true\n")
        assert block.body.startswith("\nEvery endpoint")
        assert block.start_line == 2
        assert block.body_line == 6

    def test_missing_delimiter(self):
        with pytest.raises(FrontMatterError) as exc_info:
            split_front_matter("# Just a heading\n")
        assert exc_info.value.code == "missing-front-matter"
        assert exc_info.value.line == 1

    def test_empty_file_is_missing(self):
        with pytest.raises(FrontMatterError) as exc_info:
            split_front_matter("")
        assert exc_info.value.code == "missing-front-matter"

    def test_unterminated_block(self):
        with pytest.raises(FrontMatterError) as exc_info:
            split_front_matter("---\ntitle: Never closed\n\nBody text\n")
        assert exc_info.value.code == "unterminated-front-matter"

    def test_yaml_document_end_marker_closes_block(self):
        block = split_front_matter("---\ntitle: Dots\n...\nBody\n")
        assert block.raw == "title: Dots\n"
        assert block.body == "Body\n"

    def test_leading_bom_is_ignored(self):
        block = split_front_matter("\ufeff---\ntitle: BOM\n---\nBody\n")
        assert block.raw == "title: BOM\n"

    def test_trailing_whitespace_on_delimiter(self):
        block = split_front_matter("---  \ntitle: x\n---\t\nBody\n")
        assert block.body == "Body\n"

    def test_only_newlines_split_lines(self):
        block = split_front_matter("---\ntitle: x\n---\nIntro\u2028continued\x0cpage\nEnd\n")
        assert block.body_line == 4
        assert block.body == "Intro\u2028continued\x0cpage\nEnd\n"

    def test_path_in_error_message(self, tmp_path):
        path = tmp_path / "post.md"
        with pytest.raises(FrontMatterError) as exc_info:
            split_front_matter("no front matter", path)
        assert str(path) in str(exc_info.value)
        assert exc_info.value.reason.startswith("file does not start")


class TestParseFrontMatter:
    def test_basic_parsing(self):
        data, body, body_line = parse_front_matter(SAMPLE_POST)
        assert data == {
            "layout": "post",
            "title": "Designing REST endpoints in Swift",
            "published": True,
        }
        assert "```swift" in body
        assert body_line == 6

    def test_keeps_key_order(self):
        data, _, _ = parse_front_matter(SAMPLE_POST)
        assert list(data) == ["layout", "title", "published"]

    def test_empty_block(self):
        data, body, body_line = parse_front_matter("---\n---\nBody only\n")
        assert data == {}
        assert body == "Body only\n"
        assert body_line == 3

    def test_invalid_yaml(self):
        text = "---\nlayout: post\ntitle: Swift: the good parts\n---\nBody\n"
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter(text)
        assert exc_info.value.code == "invalid-yaml"
        assert exc_info.value.line == 3

    def test_not_a_mapping(self):
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\n- one\n- two\n---\nBody\n")
        assert exc_info.value.code == "not-a-mapping"

    def test_scalar_block_is_not_a_mapping(self):
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\njust a sentence\n---\n")
        assert exc_info.value.code == "not-a-mapping"

    def test_quoted_boolean_stays_a_string(self):
        data, _, _ = parse_front_matter('---\npublished: "true"\n---\n')
        assert data["published"] == "true"


class TestRenderFrontMatter:
    def test_insertion_order(self):
        text = render_front_matter({"layout": "post", "title": "Hi", "published": False})
        assert text == "---\nlayout: post\ntitle: Hi\npublished: false\n---\n"

    def test_quotes_titles_with_colons(self):
        text = render_front_matter({"title": "SwiftUI: Login Forms"})
        data, _, _ = parse_front_matter(text + "Body\n")
        assert data["title"] == "SwiftUI: Login Forms"

    def test_empty_mapping(self):
        assert render_front_matter({}) == "---\n---\n"


class TestSetFrontMatterValue:
    def test_replaces_only_the_target_line(self):
        updated = set_front_matter_value(SAMPLE_POST, "published", False)
        assert updated == SAMPLE_POST.replace("published: true", "published: false")

    def test_appends_missing_key_before_closing_delimiter(self):
        text = "---\ntitle: x\n---\nBody\n"
        updated = set_front_matter_value(text, "published", True)
        assert updated == "---\ntitle: x\npublished: true\n---\nBody\n"

    def test_does_not_match_key_prefix(self):
        text = "---\npublished_at: 2020-01-01\npublished: false\n---\n"
        updated = set_front_matter_value(text, "published", True)
        assert "published_at: 2020-01-01\n" in updated
        assert "published: true\n" in updated

    def test_preserves_crlf(self):
        text = "---\r\ntitle: x\r\npublished: false\r\n---\r\nBody\r\n"
        updated = set_front_matter_value(text, "published", True)
        assert updated == "---\r\ntitle: x\r\npublished: true\r\n---\r\nBody\r\n"

    def test_preserves_bom(self):
        text = "\ufeff---\npublished: false\n---\n"
        updated = set_front_matter_value(text, "published", True)
        assert updated == "\ufeff---\npublished: true\n---\n"

    def test_replaces_block_value(self):
        text = "---\ntags:\n  - swift\n  - ios\ntitle: x\n---\n"
        updated = set_front_matter_value(text, "tags", ["interviews"])
        assert updated == "---\ntags: [interviews]\ntitle: x\n---\n"

    def test_ignores_keys_in_body(self):
        text = "---\ntitle: x\n---\npublished: false\n"
        updated = set_front_matter_value(text, "published", True)
        assert updated == "---\ntitle: x\npublished: true\n---\npublished: false\n"

    @pytest.mark.parametrize("quote", ['"', "'"])
    def test_rewrites_quoted_key(self, quote):
        text = f"---\nlayout: post\ntitle: X\n{quote}published{quote}: false\n---\nBody\n"
        updated = set_front_matter_value(text, "published", True)
        assert updated == f"---\nlayout: post\ntitle: X\n{quote}published{quote}: true\n---\nBody\n"

    def test_mismatched_quotes_are_not_the_key(self):
        text = "---\n\"published': x\n---\n"
        updated = set_front_matter_value(text, "published", True)
        assert updated.count("published") == 2

    def test_keeps_trailing_comment(self):
        text = "---\npublished: false  # flip on launch day\n---\n"
        updated = set_front_matter_value(text, "published", True)
        assert updated == "---\npublished: true  # flip on launch day\n---\n"

    def test_keeps_comment_after_empty_value(self):
        updated = set_front_matter_value("---\npublished: # todo\n---\n", "published", False)
        assert updated == "---\npublished: false # todo\n---\n"

    def test_hash_inside_quoted_value_is_not_a_comment(self):
        text = "---\ntitle: \"C #1\" # was C\n---\n"
        updated = set_front_matter_value(text, "title", "C #2")
        assert updated == "---\ntitle: 'C #2' # was C\n---\n"

    def test_unicode_line_separator_in_front_matter(self):
        text = "---\nsummary: a\u2028b\npublished: false\n---\nBody\n"
        updated = set_front_matter_value(text, "published", True)
        assert updated == "---\nsummary: a\u2028b\npublished: true\n---\nBody\n"

    def test_requires_front_matter(self):
        with pytest.raises(FrontMatterError):
            set_front_matter_value("Body only\n", "published", True)
