"""
Key-value persistence interface for serialized projects.
"""

from abc import ABC, abstractmethod
from typing import Optional, Set


class StorageError(Exception):
    """Raised when a storage backend cannot complete an operation."""


class ProjectStore(ABC):
    """
    Async key-value store holding serialized project blobs.

    One implementation per backend; the application picks one at startup.
    """

    @abstractmethod
    async def list(self, prefix: str = "") -> Set[str]:
        """Return every stored key starting with prefix."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under key."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete key. Removing an absent key is a no-op."""
