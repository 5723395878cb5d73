"""Abstract storage interfaces for Xtrim."""

from abc import ABC, abstractmethod
from typing import Optional


class BinaryStoreInterface(ABC):
    """Abstract store for raw media bytes keyed by media id.

    Implementations must not retry failed writes; callers decide how
    to degrade.
    """

    @abstractmethod
    async def save(self, media_id: str, content: bytes) -> None:
        """Persist binary content under a media id.

        Args:
            media_id: Key for the content
            content: Raw file bytes

        Raises:
            StorageError: If the write fails
            ValueError: If the media id is malformed
        """
        pass

    @abstractmethod
    async def get(self, media_id: str) -> Optional[bytes]:
        """Load binary content.

        Args:
            media_id: Key used in save()

        Returns:
            The stored bytes, or None if nothing is stored under the id

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def delete(self, media_id: str) -> bool:
        """Delete stored content.

        Args:
            media_id: Key to delete

        Returns:
            True if content was deleted, False if it didn't exist

        Raises:
            StorageError: If deletion fails
        """
        pass

    @abstractmethod
    async def exists(self, media_id: str) -> bool:
        """Check if content is stored under the id."""
        pass


class KeyValueStoreInterface(ABC):
    """Synchronous string key-value storage (local preferences, project lists)."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
