"""
Storage Services Package

Provides the key-value interface and its local implementations.
"""

from expense_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StorageWriteError,
)
from expense_tracker.services.storage.json_file import JsonFileKeyValueStore
from expense_tracker.services.storage.memory import InMemoryKeyValueStore

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
