"""
Abstract Storage Interface

DESIGN DECISION: Persistence deals in whole snapshots. The state is
small, so every save writes the full wire-format dict and every load
reads it back; there are no partial updates to keep consistent.

Local persistence is synchronous on purpose: the snapshot on disk must
be written before the next user action is handled.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from weekly_keeper.errors import WeeklyKeeperError


class StateStorageInterface(ABC):
    """
    Abstract interface for local state persistence.

    Any storage implementation (JSON file, in-memory, ...) must
    implement these methods.
    """

    @abstractmethod
    def load_raw(self) -> Optional[dict[str, Any]]:
        """
        Read the persisted snapshot.

        Returns:
            The wire-format dict, or None if nothing was saved yet

        Raises:
            StorageError: If the snapshot exists but cannot be read
        """
        pass

    @abstractmethod
    def save_raw(self, payload: dict[str, Any]) -> None:
        """
        Overwrite the persisted snapshot.

        Args:
            payload: The wire-format dict

        Raises:
            PersistenceError: If the snapshot could not be written
        """
        pass


class StorageError(WeeklyKeeperError):
    """Base exception for storage operations."""
    pass


class PersistenceError(StorageError):
    """The snapshot could not be written (disk full, permissions, ...)."""
    pass


class CorruptSnapshotError(StorageError):
    """The persisted snapshot exists but is not valid JSON."""
    pass


class ImportFormatError(StorageError):
    """An imported or restored snapshot is malformed."""
    pass
