"""
Abstract Storage Interface

DESIGN DECISION: Services depend on a small key-value capability rather
than a concrete storage mechanism. This allows us to:
1. Use a JSON preferences file in the app
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally tiny - flags and encoded blobs under fixed
keys are all the tracker persists.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for flat key-value storage.

    Calls are synchronous; each write is a single key-set with no
    read-modify-write across keys.
    """

    @abstractmethod
    def get_bool(self, key: str) -> Optional[bool]:
        """
        Read a boolean flag.

        Returns:
            The stored flag, or None if the key is absent or holds
            something other than a boolean

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_bool(self, key: str, value: bool) -> None:
        """
        Store a boolean flag.

        Raises:
            StorageError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def get_data(self, key: str) -> Optional[str]:
        """
        Read an encoded blob (a JSON document as text).

        Returns:
            The stored text, or None if the key is absent
        """
        pass

    @abstractmethod
    def set_data(self, key: str, value: str) -> None:
        """Store an encoded blob under a key, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        pass

    @abstractmethod
    def contains(self, key: str) -> bool:
        """Check whether a key is present."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
