"""
Abstract Storage Interface

DESIGN DECISION: Persistence goes through a tiny key-value interface.
This allows us to:
1. Keep wallet and record serialization independent of where bytes land
2. Use in-memory storage for testing
3. Swap the JSON file for another local store later

Values are opaque strings, the same contract a browser's local storage
offers. Callers own the encoding of what they put in a slot.
"""

from abc import ABC, abstractmethod
from typing import Mapping, Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the local key-value store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a slot.

        Args:
            key: Slot name

        Returns:
            The stored string, or None if the slot is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a slot, replacing any previous value.

        Args:
            key: Slot name
            value: Serialized value

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def set_many(self, items: Mapping[str, str]) -> None:
        """
        Write several slots as one unit.

        Either every slot in ``items`` is written or none is.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a slot.

        Returns:
            True if the slot existed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List the slots currently stored."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass
