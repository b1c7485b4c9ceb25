"""Service wiring for the command-line interface."""

from typing import Optional

from .repositories import FileRepository
from .services import GuideService, LoaderService, RenderService, TocService


def configure_services(topic_level: Optional[int] = None) -> GuideService:
    """Build a GuideService backed by the local filesystem.

    Args:
        topic_level: Heading level that starts a topic in markdown sources.

    Returns:
        A GuideService with an empty content store.
    """
    file_repo = FileRepository()
    return GuideService(
        loader=LoaderService(file_repo, topic_level=topic_level),
        toc_service=TocService(),
        render_service=RenderService(file_repo),
    )
