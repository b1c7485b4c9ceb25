"""Service layer for guide operations.

Provides the content store, outline builder, renderer, loader and the
guide facade that wires them together.
"""

from .content_store import ContentStore, parse_body
from .guide_service import GuideService
from .loader_service import LoadedContent, LoaderService
from .render_service import RenderService
from .toc_service import TocService, slugify

__all__ = [
    "ContentStore",
    "parse_body",
    "GuideService",
    "LoadedContent",
    "LoaderService",
    "RenderService",
    "TocService",
    "slugify",
]

