"""Tests for the content store and body parsing.

Tests topic ordering, duplicate detection, record loading and the
split of markdown bodies into text and code blocks.
"""

import pytest

from guidebook.domain import (
    CodeBlock,
    DuplicateTitleError,
    TextBlock,
    TopicEntry,
)
from guidebook.services.content_store import ContentStore, parse_body


@pytest.fixture
def store() -> ContentStore:
    """Create a store with two topics."""
    store = ContentStore()
    store.add_topic("Syntax", "Blocks end with `end`.")
    store.add_topic("Loops", "Prefer `each` over `for`.")
    return store


class TestAddTopic:
    """Tests for adding topics."""

    def test_topics_listed_in_load_order(self, store):
        """Topics come back in the order they were added."""
        assert [t.title for t in store.list_topics()] == ["Syntax", "Loops"]

    def test_duplicate_title_rejected(self, store):
        """Adding an existing title raises DuplicateTitleError."""
        with pytest.raises(DuplicateTitleError) as exc_info:
            store.add_topic("Syntax", "again")

        assert exc_info.value.title == "Syntax"
        assert len(store) == 2

    def test_duplicate_detected_after_stripping(self, store):
        """Surrounding whitespace does not make a title unique."""
        with pytest.raises(DuplicateTitleError):
            store.add_topic("  Loops ", "")

    def test_titles_are_case_sensitive(self, store):
        """Titles differing only in case are distinct topics."""
        store.add_topic("syntax", "lowercase")
        assert len(store) == 3

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_empty_title_rejected(self, store, title):
        """Empty titles are not accepted."""
        with pytest.raises(ValueError):
            store.add_topic(title, "body")

    def test_body_blocks_accepted(self):
        """A sequence of blocks is stored as given."""
        store = ContentStore()
        blocks = [TextBlock("Intro"), CodeBlock("puts 1", "ruby")]
        topic = store.add_topic("Output", blocks)

        assert topic.body == (TextBlock("Intro"), CodeBlock("puts 1", "ruby"))

    def test_invalid_block_rejected(self):
        """Arbitrary objects are not valid body blocks."""
        store = ContentStore()
        with pytest.raises(TypeError):
            store.add_topic("Broken", [42])

    def test_missing_body_is_empty(self):
        """A topic may have no body."""
        topic = ContentStore().add_topic("Empty")
        assert topic.body == ()

    def test_topic_is_immutable(self, store):
        """Stored topics cannot be modified."""
        topic = store.list_topics()[0]
        with pytest.raises(AttributeError):
            topic.title = "Changed"  # type: ignore[misc]


class TestStoreAccess:
    """Tests for reading from the store."""

    def test_list_topics_returns_copy(self, store):
        """Mutating the returned list does not affect the store."""
        topics = store.list_topics()
        topics.clear()
        assert len(store) == 2

    def test_get_topic(self, store):
        """Topics can be looked up by title."""
        assert store.get_topic("Loops").title == "Loops"

    def test_get_missing_topic(self, store):
        """Unknown titles raise KeyError."""
        with pytest.raises(KeyError):
            store.get_topic("Metaprogramming")

    def test_contains_and_iter(self, store):
        """The store supports membership and iteration."""
        assert "Syntax" in store
        assert "Closures" not in store
        assert [t.title for t in store] == ["Syntax", "Loops"]

    def test_revision_increases_on_add(self, store):
        """Each successful add bumps the revision."""
        before = store.revision
        store.add_topic("Closures", "")
        assert store.revision == before + 1

    def test_revision_unchanged_on_failed_add(self, store):
        """A rejected add leaves the revision alone."""
        before = store.revision
        with pytest.raises(DuplicateTitleError):
            store.add_topic("Syntax", "")
        assert store.revision == before


class TestFromRecords:
    """Tests for bulk loading."""

    def test_from_records(self):
        """Records load in order."""
        store = ContentStore.from_records(
            [{"title": "Syntax", "body": "..."}, {"title": "Loops", "body": "..."}]
        )
        assert [t.title for t in store.list_topics()] == ["Syntax", "Loops"]

    def test_from_records_duplicate_aborts(self):
        """A duplicate record aborts the whole load."""
        with pytest.raises(DuplicateTitleError):
            ContentStore.from_records(
                [{"title": "Syntax"}, {"title": "Loops"}, {"title": "Syntax"}]
            )


class TestParseBody:
    """Tests for splitting markdown into blocks."""

    def test_text_and_code(self):
        """Fenced code separates text blocks."""
        body = parse_body("Intro text\n\n```ruby\nputs 1\n```\n\nMore")

        assert body == (
            TextBlock("Intro text"),
            CodeBlock("puts 1", "ruby"),
            TextBlock("More"),
        )

    def test_plain_text_only(self):
        """Text without fences is a single block."""
        assert parse_body("Just prose.\n\nTwo paragraphs.") == (
            TextBlock("Just prose.\n\nTwo paragraphs."),
        )

    def test_blank_body(self):
        """Whitespace-only bodies have no blocks."""
        assert parse_body("\n  \n") == ()

    def test_tilde_fence(self):
        """Tilde fences are code blocks too."""
        assert parse_body("~~~python\nprint()\n~~~") == (CodeBlock("print()", "python"),)

    def test_fence_without_language(self):
        """A bare fence has an empty language."""
        assert parse_body("```\nx = 1\n```") == (CodeBlock("x = 1", ""),)

    def test_unterminated_fence_runs_to_end(self):
        """An unclosed fence swallows the rest of the body."""
        assert parse_body("Text\n```ruby\nx = 1\ny = 2") == (
            TextBlock("Text"),
            CodeBlock("x = 1\ny = 2", "ruby"),
        )

    def test_longer_fence_wraps_shorter(self):
        """A four-backtick fence can contain a three-backtick fence."""
        body = parse_body("````md\n```ruby\nx\n```\n````")
        assert body == (CodeBlock("```ruby\nx\n```", "md"),)

    def test_code_block_fence_grows(self):
        """Code containing backtick runs gets a longer fence."""
        block = CodeBlock("```ruby\nx\n```", "md")
        assert block.to_markdown() == "````md\n```ruby\nx\n```\n````"


class TestTopicEntry:
    """Tests for TopicEntry helpers."""

    def test_to_markdown_round_trips_blocks(self):
        """Blocks are joined back with blank lines."""
        topic = TopicEntry(
            title="Syntax",
            body=(TextBlock("Intro"), CodeBlock("puts 1", "ruby")),
        )
        assert topic.to_markdown() == "Intro\n\n```ruby\nputs 1\n```"

    def test_code_blocks(self):
        """Only code blocks are returned."""
        topic = TopicEntry(
            title="Syntax",
            body=(TextBlock("Intro"), CodeBlock("puts 1", "ruby")),
        )
        assert topic.code_blocks == [CodeBlock("puts 1", "ruby")]
