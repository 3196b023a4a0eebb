"""
Sync Services Package

Remote snapshot mirrors (REST backend, WebDAV) and the debouncer that
uploads to them after edits settle.
"""

from weekly_keeper.services.sync.debouncer import SyncDebouncer, SyncStatus
from weekly_keeper.services.sync.interface import (
    InsecureEndpointError,
    RemoteSyncInterface,
    SyncError,
    SyncNotConfiguredError,
    TransportError,
)
from weekly_keeper.services.sync.rest import RestSyncClient
from weekly_keeper.services.sync.webdav import WebDAVSyncClient

__all__ = [
    # Interface
    "RemoteSyncInterface",
    # Exceptions
    "InsecureEndpointError",
    "SyncError",
    "SyncNotConfiguredError",
    "TransportError",
    # Implementations
    "RestSyncClient",
    "WebDAVSyncClient",
    # Debouncing
    "SyncDebouncer",
    "SyncStatus",
]
