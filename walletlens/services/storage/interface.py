"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The ledger persists through an opaque byte store.
This allows us to:
1. Use in-memory storage for testing
2. Use plain files on disk for the app and the widget namespaces
3. Keep the ledger decoupled from where the bytes live

The interface is intentionally tiny: get, set and remove by key.
There are no transactions and no schema versioning.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for a key to byte-blob store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Read the value stored under a key.

        Args:
            key: The key to read

        Returns:
            The stored bytes, or None if the key was never set

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass

    def contains(self, key: str) -> bool:
        return self.get(key) is not None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class EncodingError(StorageError):
    """Stored bytes could not be encoded or decoded."""
    pass
