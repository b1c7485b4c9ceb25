"""Content store implementation.

Holds the ordered sequence of topic entries that make up a guide and
splits markdown bodies into text and code blocks.
"""

import logging
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any, Union

from ..domain.content import Block, CodeBlock, TextBlock, TopicEntry
from ..domain.errors import DuplicateTitleError

logger = logging.getLogger(__name__)

# Opening fence: three or more backticks or tildes, optional info string
FENCE_PATTERN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})\s*(?P<info>[^`]*)$")

BodyInput = Union[str, Sequence[Block], None]


def parse_body(markdown: str) -> tuple[Block, ...]:
    """Split markdown into text and fenced code blocks.

    Args:
        markdown: The markdown source of a topic body.

    Returns:
        Tuple of TextBlock and CodeBlock objects in document order.
        Blank text between code blocks is dropped.
    """
    blocks: list[Block] = []
    text_lines: list[str] = []
    code_lines: list[str] = []
    fence = ""
    language = ""

    def flush_text() -> None:
        text = "\n".join(text_lines).strip("\n")
        if text.strip():
            blocks.append(TextBlock(text=text))
        text_lines.clear()

    for line in markdown.split("\n"):
        if fence:
            stripped = line.strip()
            if stripped and set(stripped) == {fence[0]} and len(stripped) >= len(fence):
                blocks.append(CodeBlock(code="\n".join(code_lines), language=language))
                code_lines = []
                fence = ""
            else:
                code_lines.append(line)
            continue

        match = FENCE_PATTERN.match(line)
        if match:
            flush_text()
            fence = match.group("fence")
            info = match.group("info").strip()
            language = info.split()[0].lstrip(".{") if info else ""
            continue

        text_lines.append(line)

    if fence:
        # Unterminated fence runs to the end of the body
        blocks.append(CodeBlock(code="\n".join(code_lines), language=language))
    flush_text()

    return tuple(blocks)


def coerce_body(body: BodyInput) -> tuple[Block, ...]:
    """Normalize the accepted body forms into a tuple of blocks."""
    if body is None:
        return ()
    if isinstance(body, str):
        return parse_body(body)

    blocks = tuple(body)
    for block in blocks:
        if not isinstance(block, (TextBlock, CodeBlock)):
            raise TypeError(f"Unsupported body block: {block!r}")
    return blocks


class ContentStore:
    """Ordered, title-unique collection of topic entries.

    Topics are added while content is loaded and are read back in the
    order they were added. Each successful add bumps ``revision`` so
    derived structures such as the outline know when to rebuild.
    """

    def __init__(self) -> None:
        self._topics: list[TopicEntry] = []
        self._titles: set[str] = set()
        self._revision = 0

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "ContentStore":
        """Build a store from title/body records.

        The load is all-or-nothing: any invalid or duplicate record
        aborts it and no store is returned.

        Args:
            records: Mappings with a ``title`` key and optional ``body``.

        Returns:
            A populated ContentStore.

        Raises:
            DuplicateTitleError: If two records share a title.
            ValueError: If a record has no usable title.
        """
        store = cls()
        for record in records:
            store.add_topic(record.get("title", ""), record.get("body"))
        logger.debug("Loaded %d topic(s) from records", len(store))
        return store

    @property
    def revision(self) -> int:
        """Counter that increases whenever the topic sequence changes."""
        return self._revision

    def add_topic(self, title: str, body: BodyInput = None) -> TopicEntry:
        """Append a topic to the store.

        Args:
            title: Unique, non-empty topic title.
            body: Markdown string or sequence of blocks.

        Returns:
            The stored TopicEntry.

        Raises:
            DuplicateTitleError: If the title is already present.
            ValueError: If the title is empty.
        """
        if not isinstance(title, str) or not title.strip():
            raise ValueError("Topic title must be a non-empty string")
        title = title.strip()

        if title in self._titles:
            raise DuplicateTitleError(title)

        topic = TopicEntry(title=title, body=coerce_body(body))
        self._topics.append(topic)
        self._titles.add(title)
        self._revision += 1

        logger.debug("Added topic %r with %d block(s)", title, len(topic.body))
        return topic

    def list_topics(self) -> list[TopicEntry]:
        """Return the topics in load order."""
        return list(self._topics)

    def get_topic(self, title: str) -> TopicEntry:
        """Look up a topic by title.

        Raises:
            KeyError: If no topic has this title.
        """
        title = title.strip()
        for topic in self._topics:
            if topic.title == title:
                return topic
        raise KeyError(title)

    def __len__(self) -> int:
        return len(self._topics)

    def __iter__(self) -> Iterator[TopicEntry]:
        return iter(list(self._topics))

    def __contains__(self, title: object) -> bool:
        return isinstance(title, str) and title.strip() in self._titles
