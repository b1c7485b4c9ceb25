"""Filesystem-backed file repository."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileRepository:
    """Reads and writes guide sources and rendered output on local disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_file(self, path: Path) -> str:
        logger.debug("Reading %s", path)
        return path.read_text(encoding="utf-8")

    def write_file(self, path: Path, content: str) -> None:
        logger.debug("Writing %d characters to %s", len(content), path)
        path.write_text(content, encoding="utf-8")

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def list_files(self, directory: Path, pattern: str = "*") -> list[Path]:
        return sorted(p for p in directory.glob(pattern) if p.is_file())
