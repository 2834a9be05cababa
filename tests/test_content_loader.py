"""Tests for content/collections.py and content/loader.py."""

from pathlib import Path

import pytest
from content.collections import COLLECTIONS, collection_names, get_collection
from content.errors import UnknownCollectionError
from content.loader import discover, load_collection


class TestCollections:
    def test_names(self):
        assert collection_names() == ["articles", "gallery", "projects"]

    def test_unknown_collection(self):
        with pytest.raises(UnknownCollectionError):
            get_collection("pages")

    def test_base_dir(self):
        assert COLLECTIONS["articles"].base_dir == "articles"
        assert COLLECTIONS["gallery"].base_dir == "gallery"

    def test_articles_are_flat(self):
        articles = get_collection("articles")
        assert articles.matches("articles/post.md")
        assert not articles.matches("articles/drafts/post.md")
        assert not articles.matches("articles/post.txt")

    def test_gallery_is_recursive(self):
        gallery = get_collection("gallery")
        assert gallery.matches("gallery/a.md")
        assert gallery.matches("gallery/2024/08/a.md")
        assert not gallery.matches("articles/a.md")

    def test_projects_exclude_index(self):
        projects = get_collection("projects")
        assert projects.matches("projects/prism.md")
        assert not projects.matches("projects/index.md")


class TestDiscover:
    def test_finds_sorted_files(self, content_root: Path):
        files = discover(get_collection("articles"), content_root)
        assert [f.name for f in files] == ["1.first-post.md", "2.second-post.md"]

    def test_missing_directory(self, tmp_path: Path):
        assert discover(get_collection("gallery"), tmp_path) == []

    def test_projects_skip_index(self, content_root: Path):
        files = discover(get_collection("projects"), content_root)
        assert [f.name for f in files] == ["prism.md"]


class TestLoadCollection:
    def test_loads_entries(self, content_root: Path):
        result = load_collection(get_collection("articles"), content_root)

        assert result.errors == []
        assert [e.path for e in result.entries] == ["/articles/first-post", "/articles/second-post"]

    def test_nested_gallery(self, content_root: Path):
        result = load_collection(get_collection("gallery"), content_root)
        assert [e.path for e in result.entries] == ["/gallery/2024/harbour"]

    def test_invalid_file_is_reported_not_indexed(self, content_root: Path):
        (content_root / "articles" / "3.broken.md").write_text(
            "---\ntitle: Broken\ntags: []\ndate: 2024-01-01\n---\n", encoding="utf-8"
        )
        result = load_collection(get_collection("articles"), content_root)

        assert len(result.entries) == 2
        assert result.errors[0]["file"] == "articles/3.broken.md"
        assert result.errors[0]["reason"] == "validation"

    def test_unparsable_file_is_reported(self, content_root: Path):
        (content_root / "articles" / "bad.md").write_text("---\n: [\n---\n", encoding="utf-8")
        result = load_collection(get_collection("articles"), content_root)
        assert [e["reason"] for e in result.errors] == ["parse"]

    def test_duplicate_path_first_file_wins(self, content_root: Path):
        # `3.first-post.md` also derives `/articles/first-post`.
        text = (content_root / "articles" / "1.first-post.md").read_text(encoding="utf-8")
        (content_root / "articles" / "3.first-post.md").write_text(text, encoding="utf-8")

        result = load_collection(get_collection("articles"), content_root)

        assert len(result.entries) == 2
        assert result.errors == [
            {
                "file": "articles/3.first-post.md",
                "reason": "duplicate_path",
                "details": "/articles/first-post already provided by articles/1.first-post.md",
            }
        ]
