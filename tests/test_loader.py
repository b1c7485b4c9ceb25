"""Tests for loading content sources.

Tests JSON records, single markdown files split by heading level and
directories of markdown topic files.
"""

import json

import pytest

from guidebook.domain import CodeBlock, DuplicateTitleError, TextBlock
from guidebook.repositories import FileRepository
from guidebook.services.loader_service import LoaderService, _path_to_title


@pytest.fixture
def loader() -> LoaderService:
    """Create a LoaderService over the real filesystem."""
    return LoaderService(FileRepository(), topic_level=2)


GUIDE_MARKDOWN = """---
author: Someone
---
# Ruby for Experienced Developers

This preface is not a topic.

## Syntax

Blocks use `do`.

```ruby
# not a guide title
## not a topic either
puts 1
```

## Loops

Use `each`.
"""


class TestLoadJson:
    """Tests for JSON sources."""

    def test_object_with_topics(self, loader, tmp_path):
        """An object source carries a title and topic records."""
        source = tmp_path / "guide.json"
        source.write_text(
            json.dumps(
                {
                    "title": "Ruby",
                    "topics": [
                        {"title": "Syntax", "body": "Text"},
                        {
                            "title": "Loops",
                            "body": [
                                {"type": "text", "text": "Use each."},
                                {"type": "code", "code": "[1].each {}", "language": "ruby"},
                            ],
                        },
                    ],
                }
            ),
            encoding="utf-8",
        )

        loaded = loader.load(source)

        assert loaded.title == "Ruby"
        topics = loaded.store.list_topics()
        assert [t.title for t in topics] == ["Syntax", "Loops"]
        assert topics[0].body == (TextBlock("Text"),)
        assert topics[1].body == (
            TextBlock("Use each."),
            CodeBlock("[1].each {}", "ruby"),
        )

    def test_list_of_records(self, loader, tmp_path):
        """A bare list loads with the default title."""
        source = tmp_path / "guide.json"
        source.write_text(json.dumps([{"title": "Syntax", "body": "..."}]), encoding="utf-8")

        loaded = loader.load(source)

        assert loaded.title == "Guide"
        assert len(loaded.store) == 1

    def test_duplicate_titles(self, loader, tmp_path):
        """Duplicate records abort the load."""
        source = tmp_path / "guide.json"
        source.write_text(
            json.dumps([{"title": "Syntax"}, {"title": "Syntax"}]), encoding="utf-8"
        )

        with pytest.raises(DuplicateTitleError):
            loader.load(source)

    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            json.dumps({"title": "No topics"}),
            json.dumps([{"body": "untitled"}]),
            json.dumps([{"title": "Bad", "body": 42}]),
            json.dumps([{"title": "Bad", "body": [{"type": "video"}]}]),
            json.dumps(["just a string"]),
        ],
    )
    def test_invalid_json(self, loader, tmp_path, payload):
        """Malformed sources raise ValueError."""
        source = tmp_path / "guide.json"
        source.write_text(payload, encoding="utf-8")

        with pytest.raises(ValueError):
            loader.load(source)


class TestLoadMarkdownFile:
    """Tests for single markdown file sources."""

    def test_split_on_topic_headings(self, loader, tmp_path):
        """Level-2 headings start topics; the level-1 heading is the title."""
        source = tmp_path / "ruby.md"
        source.write_text(GUIDE_MARKDOWN, encoding="utf-8")

        loaded = loader.load(source)

        assert loaded.title == "Ruby for Experienced Developers"
        assert [t.title for t in loaded.store.list_topics()] == ["Syntax", "Loops"]

    def test_headings_in_code_do_not_split(self, loader, tmp_path):
        """Headings inside fenced code stay in the code block."""
        source = tmp_path / "ruby.md"
        source.write_text(GUIDE_MARKDOWN, encoding="utf-8")

        syntax = loader.load(source).store.get_topic("Syntax")

        assert syntax.body[0] == TextBlock("Blocks use `do`.")
        assert syntax.body[1] == CodeBlock(
            "# not a guide title\n## not a topic either\nputs 1", "ruby"
        )

    def test_title_from_filename(self, loader, tmp_path):
        """Without a level-1 heading the file name gives the title."""
        source = tmp_path / "01-ruby_basics.md"
        source.write_text("## Syntax\n\nText\n", encoding="utf-8")

        assert loader.load(source).title == "Ruby Basics"

    def test_topic_level_three(self, tmp_path):
        """A deeper topic level splits on ### headings."""
        source = tmp_path / "guide.md"
        source.write_text(
            "# Guide\n\n## Part I\n\n### Syntax\n\nA\n\n### Loops\n\nB\n",
            encoding="utf-8",
        )

        loaded = LoaderService(FileRepository(), topic_level=3).load(source)

        assert [t.title for t in loaded.store.list_topics()] == ["Syntax", "Loops"]

    def test_duplicate_headings(self, loader, tmp_path):
        source = tmp_path / "guide.md"
        source.write_text("## Syntax\n\nA\n\n## Syntax\n\nB\n", encoding="utf-8")

        with pytest.raises(DuplicateTitleError):
            loader.load(source)


class TestLoadDirectory:
    """Tests for directory sources."""

    def test_one_topic_per_file(self, loader, tmp_path):
        """Markdown files load in name order; other files are skipped."""
        guide_dir = tmp_path / "ruby-guide"
        guide_dir.mkdir()
        (guide_dir / "02-control_flow.md").write_text("Use `while`.\n", encoding="utf-8")
        (guide_dir / "01-syntax.md").write_text(
            "# Syntax Basics\n\nBlocks.\n", encoding="utf-8"
        )
        (guide_dir / "README.md").write_text("# Readme\n", encoding="utf-8")
        (guide_dir / "notes.txt").write_text("ignore me", encoding="utf-8")

        loaded = loader.load(guide_dir)

        assert loaded.title == "Ruby Guide"
        topics = loaded.store.list_topics()
        assert [t.title for t in topics] == ["Syntax Basics", "Control Flow"]
        assert topics[0].body == (TextBlock("Blocks."),)

    def test_frontmatter_stripped(self, loader, tmp_path):
        guide_dir = tmp_path / "guide"
        guide_dir.mkdir()
        (guide_dir / "closures.md").write_text(
            "---\ndraft: true\n---\n# Closures\n\nProcs and lambdas.\n",
            encoding="utf-8",
        )

        topic = loader.load(guide_dir).store.get_topic("Closures")

        assert topic.body == (TextBlock("Procs and lambdas."),)


class TestLoadErrors:
    """Tests for unusable sources."""

    def test_missing_source(self, loader, tmp_path):
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "missing.json")

    def test_unsupported_suffix(self, loader, tmp_path):
        source = tmp_path / "guide.txt"
        source.write_text("text", encoding="utf-8")

        with pytest.raises(ValueError, match="Unsupported"):
            loader.load(source)


class TestPathToTitle:
    """Tests for file name to title conversion."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("01-introduction.md", "Introduction"),
            ("ch02-blocks_and_procs.md", "Blocks And Procs"),
            ("chapter-3-modules.md", "Modules"),
            ("metaprogramming.md", "Metaprogramming"),
            ("42.md", "42"),
        ],
    )
    def test_path_to_title(self, name, expected):
        assert _path_to_title(name) == expected
