"""Repository interfaces for filesystem access."""

from pathlib import Path
from typing import Protocol


class IFileRepository(Protocol):
    """Protocol for file system operations used by the services."""

    def exists(self, path: Path) -> bool:
        """Check whether a path exists."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check whether a path is a directory."""
        ...

    def read_file(self, path: Path) -> str:
        """Read a UTF-8 text file."""
        ...

    def write_file(self, path: Path, content: str) -> None:
        """Write a UTF-8 text file, replacing any existing content."""
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        ...

    def list_files(self, directory: Path, pattern: str = "*") -> list[Path]:
        """List files in a directory matching a glob pattern, sorted by name."""
        ...
