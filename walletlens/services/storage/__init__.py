"""
Storage Services Package

Provides the key-value storage interface, its implementations,
and the JSON codec for ledger collections.
"""

from walletlens.services.storage.interface import (
    EncodingError,
    KeyValueStore,
    StorageError,
)
from walletlens.services.storage.memory import InMemoryKeyValueStore
from walletlens.services.storage.file_store import FileKeyValueStore
from walletlens.services.storage.codec import LedgerCodec

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "EncodingError",
    "StorageError",
    # Implementations
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    # Codec
    "LedgerCodec",
]
