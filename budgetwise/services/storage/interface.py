"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the raw key-value
backend. This allows us to:
1. Keep data in plain files on the device today
2. Use in-memory storage for testing
3. Swap in another on-device store later without touching the stores

The interface mirrors a minimal async key-value API: text values only.
Encoding, namespacing and error downgrading live one level up, in
KeyValueStore.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageBackend(ABC):
    """
    Abstract interface for an asynchronous text key-value backend.

    Backends raise StorageError subclasses on failure. They never
    interpret the values they hold.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored text, or None if the key is absent
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass

    @abstractmethod
    async def get_all_keys(self) -> list[str]:
        """List every key held by the backend."""
        pass

    async def multi_get(self, keys: list[str]) -> list[tuple[str, Optional[str]]]:
        """Read several keys. Returns (key, value) pairs in request order."""
        return [(key, await self.get_item(key)) for key in keys]

    async def multi_remove(self, keys: list[str]) -> None:
        """Remove several keys."""
        for key in keys:
            await self.remove_item(key)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class BackendUnavailableError(StorageError):
    """The backend could not be read or written."""
    pass


class InvalidKeyError(StorageError):
    """The key cannot be represented by this backend."""
    pass
