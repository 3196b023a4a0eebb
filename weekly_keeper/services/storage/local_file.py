"""
Local JSON File Storage

The default persistence backend: one JSON file holding the whole
snapshot, rewritten on every change.

Writes go to a temporary file in the same directory and are moved into
place with os.replace(), so a crash mid-write leaves the previous
snapshot intact rather than a truncated file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from weekly_keeper.services.storage.interface import (
    CorruptSnapshotError,
    PersistenceError,
    StateStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileStorage(StateStorageInterface):
    """Snapshot persisted as a single pretty-printed JSON file."""

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_raw(self) -> Optional[dict[str, Any]]:
        if not self._path.exists():
            return None
        try:
            text = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptSnapshotError(f"{self._path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptSnapshotError(f"{self._path} is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise CorruptSnapshotError(f"{self._path} does not hold a JSON object")
        return payload

    def save_raw(self, payload: dict[str, Any]) -> None:
        try:
            text = json.dumps(payload, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Snapshot is not serializable: {e}") from e

        try:
            self._write_atomic(text)
        except OSError as e:
            logger.error("snapshot_write_failed", path=str(self._path), error=str(e))
            raise PersistenceError(f"Could not write {self._path}: {e}") from e

        logger.debug("snapshot_written", path=str(self._path), size=len(text))

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, text: str) -> None:
        """Write through a temp file; transient OS errors are retried."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
