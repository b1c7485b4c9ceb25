"""Domain layer for guide representation."""

from .content import (
    Block,
    CodeBlock,
    Guide,
    OutlineEntry,
    TextBlock,
    TopicEntry,
)
from .errors import DuplicateTitleError, EmptyContentError, GuideError

__all__ = [
    "Block",
    "CodeBlock",
    "Guide",
    "OutlineEntry",
    "TextBlock",
    "TopicEntry",
    "GuideError",
    "DuplicateTitleError",
    "EmptyContentError",
]
