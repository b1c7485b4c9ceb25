"""
Configuration settings for the guidebook renderer
"""

import os


class GuideConfig:
    """Configuration class for guide loading and rendering."""

    # Title used when the source does not name the guide
    DEFAULT_TITLE = "Guide"

    # Output formats
    OUTPUT_FORMATS = ("html", "markdown", "text")
    DEFAULT_FORMAT = "html"

    # Heading level that starts a new topic in a single markdown source (##)
    DEFAULT_TOPIC_LEVEL = 2
    MIN_TOPIC_LEVEL = 1
    MAX_TOPIC_LEVEL = 6

    # Source files
    JSON_SUFFIXES = {".json"}
    MARKDOWN_SUFFIXES = {".md", ".markdown"}
    SKIP_FILES = {"SUMMARY.md", "README.md"}

    # Anchor used when a title has no sluggable characters
    FALLBACK_ANCHOR = "topic"

    # Heading text of the outline section
    OUTLINE_HEADING = "Contents"

    # Markdown rendering settings
    MARKDOWN_EXTENSIONS = [
        "footnotes",
        "attr_list",
        "def_list",
    ]

    # Code highlighting theme
    CODE_THEME = "github-dark"

    # Display settings
    CONSOLE_WIDTH = 100

    # Color scheme
    COLORS = {
        "header": "bold blue",
        "topic_title": "bold green",
        "navigation": "dim",
        "error": "red",
        "success": "green",
        "warning": "yellow",
        "info": "blue",
    }

    @classmethod
    def get_output_format(cls) -> str:
        """Get the default output format, checking environment variables."""
        fmt = os.environ.get("GUIDEBOOK_FORMAT", "").strip().lower()
        if fmt in cls.OUTPUT_FORMATS:
            return fmt
        return cls.DEFAULT_FORMAT

    @classmethod
    def get_topic_level(cls) -> int:
        """Get the topic heading level, checking environment variables."""
        raw = os.environ.get("GUIDEBOOK_TOPIC_LEVEL")
        if raw:
            try:
                level = int(raw)
            except ValueError:
                return cls.DEFAULT_TOPIC_LEVEL
            if cls.MIN_TOPIC_LEVEL <= level <= cls.MAX_TOPIC_LEVEL:
                return level
        return cls.DEFAULT_TOPIC_LEVEL

    @classmethod
    def get_code_theme(cls) -> str:
        """Get the terminal code theme, checking environment variables."""
        return os.environ.get("GUIDEBOOK_CODE_THEME") or cls.CODE_THEME
