"""Errors raised while loading and rendering guides."""


class GuideError(Exception):
    """Base class for guide content errors."""


class DuplicateTitleError(GuideError):
    """A topic with the same title is already in the store."""

    def __init__(self, title: str) -> None:
        super().__init__(f"Topic already exists: {title!r}")
        self.title = title


class EmptyContentError(GuideError):
    """There are no topics to build an outline from."""

    def __init__(self, message: str = "Guide has no topics") -> None:
        super().__init__(message)
