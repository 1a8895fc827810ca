"""Tests for the post reader (discovery, parsing, lookup)."""

from datetime import date
from pathlib import Path

import pytest

from postkit.errors import FrontMatterError, PostNotFoundError
from postkit.posts.reader import PostReader


def _write(directory: Path, name: str, title: str, published: bool = True) -> Path:
    path = directory / name
    path.write_text(
        f"---\nlayout: post\ntitle: {title}\npublished: {str(published).lower()}\n---\n\nBody of {title}.\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "_posts"
    directory.mkdir()
    _write(directory, "2019-03-10-rest-endpoints.md", "REST Endpoints")
    _write(directory, "2020-07-21-styling-schemes.md", "Styling Schemes")
    _write(directory, "2018-11-02-ui-testing.md", "UI Testing", published=False)
    (directory / "2021-01-01-broken.md").write_text("no front matter\n", encoding="utf-8")
    return directory


class TestRead:
    def test_reads_post(self, posts_dir: Path):
        post = PostReader().read(posts_dir / "2019-03-10-rest-endpoints.md")
        assert post.title == "REST Endpoints"
        assert post.layout == "post"
        assert post.published is True
        assert post.slug == "rest-endpoints"
        assert post.date == date(2019, 3, 10)
        assert post.body_line == 6
        assert post.body.strip() == "Body of REST Endpoints."

    def test_raises_on_bad_front_matter(self, posts_dir: Path):
        with pytest.raises(FrontMatterError):
            PostReader().read(posts_dir / "2021-01-01-broken.md")


class TestReadAll:
    def test_newest_first_and_skips_invalid(self, posts_dir: Path):
        posts = PostReader().read_all(posts_dir)
        assert [p.slug for p in posts] == ["styling-schemes", "rest-endpoints", "ui-testing"]

    def test_missing_directory(self, tmp_path: Path):
        assert PostReader().read_all(tmp_path / "missing") == []

    def test_pattern(self, posts_dir: Path):
        _write(posts_dir, "2022-02-02-notes.markdown", "Notes")
        posts = PostReader("*.markdown").read_all(posts_dir)
        assert [p.slug for p in posts] == ["notes"]

    def test_undated_posts_sort_last(self, posts_dir: Path):
        _write(posts_dir, "about.md", "About")
        posts = PostReader().read_all(posts_dir)
        assert posts[-1].slug == "about"
        assert posts[-1].date is None


class TestFind:
    def test_by_slug(self, posts_dir: Path):
        post = PostReader().find(posts_dir, "ui-testing")
        assert post.title == "UI Testing"

    def test_by_file_stem(self, posts_dir: Path):
        post = PostReader().find(posts_dir, "2020-07-21-styling-schemes")
        assert post.slug == "styling-schemes"

    def test_by_file_name(self, posts_dir: Path):
        post = PostReader().find(posts_dir, "2019-03-10-rest-endpoints.md")
        assert post.slug == "rest-endpoints"

    def test_by_path(self, posts_dir: Path):
        path = posts_dir / "2019-03-10-rest-endpoints.md"
        assert PostReader().find(Path("/nonexistent"), str(path)).path == path

    def test_not_found(self, posts_dir: Path):
        with pytest.raises(PostNotFoundError):
            PostReader().find(posts_dir, "login-forms")
