"""
Storage Services Package

Provides the abstract snapshot storage interface and its local
implementations. Remote copies are handled by services.sync.
"""

from weekly_keeper.services.storage.interface import (
    CorruptSnapshotError,
    ImportFormatError,
    PersistenceError,
    StateStorageInterface,
    StorageError,
)
from weekly_keeper.services.storage.local_file import JsonFileStorage
from weekly_keeper.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "StateStorageInterface",
    # Exceptions
    "CorruptSnapshotError",
    "ImportFormatError",
    "PersistenceError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
