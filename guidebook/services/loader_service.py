"""Loader service implementation.

Reads a content source (JSON records, a single markdown file, or a
directory of markdown files) into a ContentStore.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..config import GuideConfig
from ..domain.content import Block, CodeBlock, TextBlock
from ..repositories.interfaces import IFileRepository
from .content_store import FENCE_PATTERN, ContentStore

logger = logging.getLogger(__name__)


@dataclass
class LoadedContent:
    """Result of loading a content source."""

    title: str
    store: ContentStore
    source: Path


class LoaderService:
    """Service for loading guide content from disk.

    Supports:
    - ``.json`` files holding topic records
    - a single markdown file split into topics at one heading level
    - a directory where every markdown file is one topic
    """

    TITLE_PATTERN = re.compile(r"^#\s+(.+?)\s*#*\s*$")

    def __init__(
        self,
        file_repo: IFileRepository,
        topic_level: Optional[int] = None,
    ) -> None:
        """Initialize the loader service with required dependencies.

        Args:
            file_repo: Repository for file system operations.
            topic_level: Heading level that starts a topic in a markdown
                file (defaults to the configured level).
        """
        self._file_repo = file_repo
        self._topic_level = topic_level or GuideConfig.get_topic_level()
        self._topic_pattern = re.compile(
            rf"^#{{{self._topic_level}}}\s+(.+?)\s*#*\s*$"
        )

    def load(self, source: Path) -> LoadedContent:
        """Load a content source into a new ContentStore.

        Args:
            source: JSON file, markdown file, or directory of markdown files.

        Returns:
            LoadedContent with the guide title and populated store.

        Raises:
            FileNotFoundError: If the source does not exist.
            ValueError: If the source type or content is not supported.
            DuplicateTitleError: If two topics share a title.
        """
        if not self._file_repo.exists(source):
            raise FileNotFoundError(f"Content source not found: {source}")

        if self._file_repo.is_dir(source):
            result = self._load_directory(source)
        elif source.suffix.lower() in GuideConfig.JSON_SUFFIXES:
            result = self._load_json(source)
        elif source.suffix.lower() in GuideConfig.MARKDOWN_SUFFIXES:
            result = self._load_markdown(source)
        else:
            raise ValueError(f"Unsupported content source: {source}")

        logger.info(
            "Loaded %d topic(s) for %r from %s", len(result.store), result.title, source
        )
        return result

    # JSON

    def _load_json(self, source: Path) -> LoadedContent:
        try:
            data = json.loads(self._file_repo.read_file(source))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {source}: {e}") from e

        title = GuideConfig.DEFAULT_TITLE
        if isinstance(data, dict):
            title = str(data.get("title") or title)
            data = data.get("topics")
        if not isinstance(data, list):
            raise ValueError(f"{source}: expected a list of topic records")

        records = [self._parse_record(record, idx) for idx, record in enumerate(data)]
        return LoadedContent(
            title=title, store=ContentStore.from_records(records), source=source
        )

    def _parse_record(self, record: Any, idx: int) -> dict[str, Any]:
        """Validate one JSON topic record and convert its body."""
        if not isinstance(record, dict):
            raise ValueError(f"Topic record {idx} is not an object")

        title = record.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"Topic record {idx} has no title")

        body = record.get("body", "")
        if isinstance(body, list):
            body = [self._parse_block(block, idx) for block in body]
        elif not isinstance(body, str):
            raise ValueError(f"Topic record {idx} has an invalid body")

        return {"title": title, "body": body}

    def _parse_block(self, block: Any, idx: int) -> Block:
        if isinstance(block, str):
            return TextBlock(text=block)
        if not isinstance(block, dict):
            raise ValueError(f"Topic record {idx} has an invalid body block")

        kind = block.get("type", "text")
        if kind == "code":
            return CodeBlock(
                code=str(block.get("code", block.get("text", ""))),
                language=str(block.get("language") or ""),
            )
        if kind == "text":
            return TextBlock(text=str(block.get("text", "")))
        raise ValueError(f"Topic record {idx} has unknown block type {kind!r}")

    # Markdown file

    def _load_markdown(self, source: Path) -> LoadedContent:
        content = self._strip_frontmatter(self._file_repo.read_file(source))

        title: Optional[str] = None
        store = ContentStore()
        current_title: Optional[str] = None
        current_lines: list[str] = []
        preface_lines = 0
        fence = ""

        for line in content.split("\n"):
            fence_match = None if fence else FENCE_PATTERN.match(line)
            if fence:
                stripped = line.strip()
                if stripped and set(stripped) == {fence[0]} and len(stripped) >= len(fence):
                    fence = ""
            elif fence_match:
                fence = fence_match.group("fence")
            else:
                topic_match = self._topic_pattern.match(line)
                if topic_match:
                    if current_title is not None:
                        store.add_topic(current_title, "\n".join(current_lines))
                    current_title = topic_match.group(1)
                    current_lines = []
                    continue

                title_match = self.TITLE_PATTERN.match(line)
                if title_match and title is None and current_title is None:
                    title = title_match.group(1)
                    continue

            if current_title is not None:
                current_lines.append(line)
            elif line.strip():
                preface_lines += 1

        if current_title is not None:
            store.add_topic(current_title, "\n".join(current_lines))

        if preface_lines:
            logger.debug("Skipped %d line(s) before the first topic", preface_lines)

        return LoadedContent(
            title=title or _path_to_title(source.name),
            store=store,
            source=source,
        )

    # Directory

    def _load_directory(self, source: Path) -> LoadedContent:
        store = ContentStore()

        for md_file in self._discover_markdown_files(source):
            content = self._strip_frontmatter(self._file_repo.read_file(md_file))
            title, body = self._split_title(content)
            store.add_topic(title or _path_to_title(md_file.name), body)

        return LoadedContent(
            title=_path_to_title(source.resolve().name) or GuideConfig.DEFAULT_TITLE,
            store=store,
            source=source,
        )

    def _discover_markdown_files(self, directory: Path) -> list[Path]:
        """Find topic files in a directory, sorted by name."""
        files = []
        for path in self._file_repo.list_files(directory):
            if path.suffix.lower() not in GuideConfig.MARKDOWN_SUFFIXES:
                continue
            if path.name in GuideConfig.SKIP_FILES:
                continue
            files.append(path)
        return files

    def _split_title(self, content: str) -> tuple[Optional[str], str]:
        """Take a leading ``# Title`` line off a topic file."""
        lines = content.lstrip("\n").split("\n")
        if lines:
            match = self.TITLE_PATTERN.match(lines[0])
            if match:
                return match.group(1), "\n".join(lines[1:])
        return None, content

    def _strip_frontmatter(self, content: str) -> str:
        """Strip YAML frontmatter from content.

        Args:
            content: The markdown content.

        Returns:
            Content with frontmatter removed.
        """
        if not content.startswith("---"):
            return content

        match = re.search(r"\n---\s*\n", content[3:])
        if match:
            return content[3 + match.end() :].lstrip()
        return content


def _path_to_title(name: str) -> str:
    """Convert a file or directory name to a readable title."""
    stem = Path(name).stem

    # Remove common prefixes like 01-, ch01-, chapter-01-
    cleaned = re.sub(r"^(ch(apter)?[-_]?)?\d+[-_]?", "", stem, flags=re.IGNORECASE)

    # Convert kebab-case and snake_case to title case
    cleaned = re.sub(r"[-_]+", " ", cleaned).strip()

    if cleaned:
        return cleaned.title()

    return stem.title()
