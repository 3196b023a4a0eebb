"""
Remote Sync Interface

A remote copy is a whole-snapshot mirror: upload overwrites it, download
returns it. There is no diffing and no merge; the last upload wins.

Transports are async so an upload never blocks the user. Their errors
are SyncError subclasses, which the debouncer catches and reports as a
status instead of raising into the UI.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from weekly_keeper.errors import WeeklyKeeperError


class RemoteSyncInterface(ABC):
    """Abstract interface for a remote snapshot mirror."""

    name: str = "remote"

    @abstractmethod
    async def upload(self, payload: dict[str, Any]) -> None:
        """
        Overwrite the remote snapshot.

        Raises:
            SyncError: If the upload did not succeed
        """
        pass

    @abstractmethod
    async def download(self) -> Optional[dict[str, Any]]:
        """
        Fetch the remote snapshot.

        Returns:
            The wire-format dict, or None if nothing was uploaded yet

        Raises:
            SyncError: If the remote could not be read
        """
        pass


class SyncError(WeeklyKeeperError):
    """Base exception for remote sync."""
    pass


class SyncNotConfiguredError(SyncError):
    """The transport is missing its endpoint configuration."""
    pass


class InsecureEndpointError(SyncError):
    """A plain http:// endpoint was used where https:// is required."""
    pass


class TransportError(SyncError):
    """The remote was unreachable or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
