"""Repository layer for filesystem access."""

from .file_repository import FileRepository
from .interfaces import IFileRepository

__all__ = ["FileRepository", "IFileRepository"]
