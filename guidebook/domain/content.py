"""Domain models for guide content.

Provides dataclasses for topic bodies (text and code blocks), topic
entries, outline entries, and the assembled guide.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class TextBlock:
    """A run of markdown prose inside a topic body."""

    text: str


@dataclass(frozen=True)
class CodeBlock:
    """A code snippet inside a topic body."""

    code: str
    language: str = ""

    @property
    def fence(self) -> str:
        """Backtick fence long enough to wrap the code safely."""
        longest = 0
        run = 0
        for char in self.code:
            run = run + 1 if char == "`" else 0
            longest = max(longest, run)
        return "`" * max(3, longest + 1)

    def to_markdown(self) -> str:
        """Render the block as a fenced markdown code block."""
        return f"{self.fence}{self.language}\n{self.code}\n{self.fence}"


Block = Union[TextBlock, CodeBlock]


@dataclass(frozen=True)
class TopicEntry:
    """One titled section of a guide.

    Created when content is loaded and never modified afterwards.
    """

    title: str
    body: tuple[Block, ...] = ()

    @property
    def code_blocks(self) -> list[CodeBlock]:
        """Code snippets in body order."""
        return [block for block in self.body if isinstance(block, CodeBlock)]

    def to_markdown(self) -> str:
        """Join the body back into a markdown string."""
        parts = []
        for block in self.body:
            if isinstance(block, CodeBlock):
                parts.append(block.to_markdown())
            else:
                parts.append(block.text)
        return "\n\n".join(parts)


@dataclass(frozen=True)
class OutlineEntry:
    """A navigation entry pointing at a topic."""

    title: str
    anchor: str  # URL-friendly slug, unique within one outline

    @property
    def href(self) -> str:
        return f"#{self.anchor}"


@dataclass
class Guide:
    """A loaded guide ready for rendering."""

    title: str
    topics: list[TopicEntry] = field(default_factory=list)
    outline: list[OutlineEntry] = field(default_factory=list)

    def pairs(self) -> list[tuple[OutlineEntry, TopicEntry]]:
        """Outline entries zipped with the topics they point at."""
        return list(zip(self.outline, self.topics))
