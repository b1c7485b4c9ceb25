"""Guide service implementation.

High-level facade that ties loading, outline building and rendering
together, keeping the outline in step with the content store.
"""

import logging
from pathlib import Path
from typing import Optional

from ..config import GuideConfig
from ..domain.content import Guide, OutlineEntry
from .content_store import ContentStore
from .loader_service import LoaderService
from .render_service import RenderService
from .toc_service import TocService

logger = logging.getLogger(__name__)


class GuideService:
    """Service coordinating a guide's store, outline and rendering.

    The outline is cached against the store's revision and rebuilt
    whenever the topic sequence changes.
    """

    def __init__(
        self,
        loader: LoaderService,
        toc_service: TocService,
        render_service: RenderService,
        store: Optional[ContentStore] = None,
        title: str = GuideConfig.DEFAULT_TITLE,
    ) -> None:
        """Initialize the guide service with required dependencies.

        Args:
            loader: Service for reading content sources.
            toc_service: Service for building outlines.
            render_service: Service for rendering output.
            store: Optional pre-populated content store.
            title: Guide title used when rendering.
        """
        self._loader = loader
        self._toc_service = toc_service
        self._render_service = render_service
        self._store = store if store is not None else ContentStore()
        self._title = title
        self._outline: list[OutlineEntry] = []
        self._outline_revision = -1

    @property
    def store(self) -> ContentStore:
        return self._store

    @property
    def title(self) -> str:
        return self._title

    def load(self, source: Path, title: Optional[str] = None) -> ContentStore:
        """Replace the current content with a source from disk.

        The current store is only replaced once the whole source loads.
        """
        loaded = self._loader.load(source)
        self._store = loaded.store
        self._title = title or loaded.title
        self._outline_revision = -1
        return self._store

    def outline(self) -> list[OutlineEntry]:
        """Return the outline, rebuilding it if the topics changed.

        Raises:
            EmptyContentError: If the store has no topics.
        """
        if self._outline_revision != self._store.revision:
            logger.debug("Rebuilding outline at revision %d", self._store.revision)
            self._outline = self._toc_service.build(self._store.list_topics())
            self._outline_revision = self._store.revision
        return list(self._outline)

    def guide(self) -> Guide:
        """Assemble the current title, topics and outline."""
        return Guide(
            title=self._title,
            topics=self._store.list_topics(),
            outline=self.outline(),
        )

    def render(self, fmt: Optional[str] = None) -> str:
        """Render the guide as one document."""
        guide = self.guide()
        return self._render_service.render(
            guide.topics, guide.outline, fmt=fmt, title=guide.title
        )

    def render_to(self, path: Path, fmt: Optional[str] = None) -> Path:
        """Render the guide as one document and write it to ``path``."""
        return self.write(self.render(fmt), path)

    def write(self, document: str, path: Path) -> Path:
        """Write an already rendered document to ``path``."""
        return self._render_service.write(document, path)

    def render_pages(self, output_dir: Path) -> list[Path]:
        """Render the guide as a paginated HTML site."""
        guide = self.guide()
        return self._render_service.render_pages(
            guide.topics, guide.outline, output_dir, title=guide.title
        )
