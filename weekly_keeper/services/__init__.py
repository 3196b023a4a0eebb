"""Services package: local storage, remote sync and backup files."""

from weekly_keeper.services.storage import (
    CorruptSnapshotError,
    ImportFormatError,
    InMemoryStorage,
    JsonFileStorage,
    PersistenceError,
    StateStorageInterface,
    StorageError,
)
from weekly_keeper.services.sync import (
    InsecureEndpointError,
    RemoteSyncInterface,
    RestSyncClient,
    SyncDebouncer,
    SyncError,
    SyncNotConfiguredError,
    SyncStatus,
    TransportError,
    WebDAVSyncClient,
)
from weekly_keeper.services.transfer import ExportedFile, export_snapshot, parse_import

__all__ = [
    # Storage
    "CorruptSnapshotError",
    "ImportFormatError",
    "InMemoryStorage",
    "JsonFileStorage",
    "PersistenceError",
    "StateStorageInterface",
    "StorageError",
    # Sync
    "InsecureEndpointError",
    "RemoteSyncInterface",
    "RestSyncClient",
    "SyncDebouncer",
    "SyncError",
    "SyncNotConfiguredError",
    "SyncStatus",
    "TransportError",
    "WebDAVSyncClient",
    # Backup files
    "ExportedFile",
    "export_snapshot",
    "parse_import",
]
