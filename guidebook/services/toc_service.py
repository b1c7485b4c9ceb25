"""TOC (Table of Contents) service implementation.

Derives a navigable outline from the titles of a guide's topics.
"""

import logging
import re
from collections.abc import Sequence

from ..config import GuideConfig
from ..domain.content import OutlineEntry, TopicEntry
from ..domain.errors import EmptyContentError

logger = logging.getLogger(__name__)


def slugify(text: str, separator: str = "-") -> str:
    """Convert text to URL-friendly slug.

    Lowercases, strips everything but letters, digits, whitespace,
    underscores and hyphens, then collapses runs of whitespace,
    underscores and hyphens into one separator. Underscores are treated
    as word separators rather than stripped, so "a_b" becomes "a-b", and
    a slug never contains two separators in a row.

    Args:
        text: The title text.
        separator: Character joining words.

    Returns:
        URL-friendly anchor string (may be empty).
    """
    text = text.lower().strip()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", separator, text)
    return text.strip(separator)


class TocService:
    """Service for building the outline of a guide.

    Produces one OutlineEntry per topic, in topic order, with anchors
    that are unique within the outline.
    """

    def __init__(self, fallback_anchor: str = GuideConfig.FALLBACK_ANCHOR) -> None:
        """Initialize the TOC service.

        Args:
            fallback_anchor: Anchor used for titles with no sluggable text.
        """
        self._fallback_anchor = fallback_anchor

    def build(self, topics: Sequence[TopicEntry]) -> list[OutlineEntry]:
        """Build the outline for an ordered sequence of topics.

        Args:
            topics: Topics in guide order.

        Returns:
            OutlineEntry list in the same order as ``topics``.

        Raises:
            EmptyContentError: If ``topics`` is empty.
        """
        if not topics:
            raise EmptyContentError("Cannot build an outline without topics")

        seen: set[str] = set()
        outline: list[OutlineEntry] = []

        for topic in topics:
            anchor = self._unique_anchor(slugify(topic.title), seen)
            seen.add(anchor)
            outline.append(OutlineEntry(title=topic.title, anchor=anchor))

        logger.debug("Built outline with %d entries", len(outline))
        return outline

    def to_markdown(self, outline: Sequence[OutlineEntry]) -> str:
        """Render the outline as a markdown bullet list of links.

        Args:
            outline: Outline entries.

        Returns:
            Markdown formatted TOC string.
        """
        return "\n".join(
            f"- [{_escape_link_text(entry.title)}]({entry.href})" for entry in outline
        )

    def _unique_anchor(self, slug: str, seen: set[str]) -> str:
        """Return ``slug`` or the first ``slug-N`` not yet used."""
        base = slug or self._fallback_anchor
        if base not in seen:
            return base

        counter = 1
        while f"{base}-{counter}" in seen:
            counter += 1
        return f"{base}-{counter}"


def _escape_link_text(text: str) -> str:
    """Escape brackets so titles cannot break markdown link syntax."""
    return text.replace("[", r"\[").replace("]", r"\]")
