"""
Sync Debouncer

Coalesces bursts of edits into one upload after a quiet period.

- schedule() (re)starts the quiet-period timer; an edit during the wait
  replaces the timer instead of queuing another upload.
- At most one upload is in flight; a flush that starts while another is
  running waits for it and then uploads the newer snapshot.
- Failures are never raised to the caller. They set status to ERROR and
  are retried only by the next scheduled sync or an explicit flush().
"""

import asyncio
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, Sequence

import structlog

from weekly_keeper.services.sync.interface import RemoteSyncInterface, SyncError


logger = structlog.get_logger(__name__)


class SyncStatus(str, Enum):
    """Connectivity indicator shown to the user."""
    IDLE = "idle"
    PENDING = "pending"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


class SyncDebouncer:
    """Debounced, single-flight upload of the current snapshot."""

    def __init__(
        self,
        transports: Sequence[RemoteSyncInterface],
        snapshot: Callable[[], dict[str, Any]],
        delay_seconds: float = 3.0,
    ):
        self._transports = list(transports)
        self._snapshot = snapshot
        self._delay = delay_seconds
        self._timer: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

        self.status = SyncStatus.IDLE
        self.last_error: Optional[str] = None
        self.last_synced_at: Optional[datetime] = None

    @property
    def enabled(self) -> bool:
        return bool(self._transports)

    def schedule(self) -> bool:
        """
        Start (or restart) the quiet-period timer.

        Returns False when there is no running event loop; the sync is
        then left PENDING until flush() is awaited.
        """
        if not self.enabled:
            return False

        self.status = SyncStatus.PENDING
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("sync_deferred_no_event_loop")
            return False

        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = loop.create_task(self._flush_after_quiet_period())
        return True

    async def _flush_after_quiet_period(self) -> None:
        await asyncio.sleep(self._delay)
        # Detach so a new schedule() cannot cancel an upload in flight.
        self._timer = None
        try:
            await self.flush()
        except Exception as e:
            # This task is never awaited, so errors stop here.
            self.status = SyncStatus.ERROR
            self.last_error = str(e)
            logger.exception("sync_crashed", error=str(e))

    async def flush(self) -> bool:
        """Upload the current snapshot to every transport now."""
        if not self.enabled:
            return False

        async with self._lock:
            self.status = SyncStatus.SYNCING
            payload = self._snapshot()
            failures = []
            for transport in self._transports:
                try:
                    await transport.upload(payload)
                except SyncError as e:
                    failures.append(f"{transport.name}: {e}")
                    logger.warning("sync_failed", transport=transport.name, error=str(e))

            if failures:
                self.status = SyncStatus.ERROR
                self.last_error = "; ".join(failures)
                return False

            self.status = SyncStatus.SYNCED
            self.last_error = None
            self.last_synced_at = datetime.now()
            logger.info("sync_succeeded", transports=[t.name for t in self._transports])
            return True

    async def wait_idle(self) -> None:
        """Wait for a scheduled sync to finish (shutdown, tests)."""
        timer = self._timer
        if timer is not None:
            try:
                await timer
            except asyncio.CancelledError:
                pass
        async with self._lock:
            pass

    def cancel(self) -> None:
        """Drop a scheduled sync that has not started uploading yet."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
