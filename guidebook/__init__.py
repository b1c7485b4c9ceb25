"""guidebook - render structured topic guides into navigable documents."""

from .domain import (
    CodeBlock,
    DuplicateTitleError,
    EmptyContentError,
    GuideError,
    OutlineEntry,
    TextBlock,
    TopicEntry,
)
from .services import ContentStore, RenderService, TocService

__all__ = [
    "CodeBlock",
    "ContentStore",
    "DuplicateTitleError",
    "EmptyContentError",
    "GuideError",
    "OutlineEntry",
    "RenderService",
    "TextBlock",
    "TocService",
    "TopicEntry",
]
