"""
REST Sync Client

Talks to the same-origin backend that stores one snapshot:
    GET  /api/data  -> snapshot JSON, or 404 if none was saved yet
    POST /api/data  -> overwrite with the JSON body
"""

import asyncio
from typing import Any, Optional

import requests
import structlog

from weekly_keeper.config.settings import RestSyncSettings
from weekly_keeper.services.sync.interface import RemoteSyncInterface, TransportError


logger = structlog.get_logger(__name__)

API_PATH = "/api/data"


class RestSyncClient(RemoteSyncInterface):
    """requests-based client, run off the event loop with asyncio.to_thread."""

    name = "rest"

    def __init__(
        self,
        settings: RestSyncSettings,
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self._settings.base_url}{API_PATH}"

    async def upload(self, payload: dict[str, Any]) -> None:
        await asyncio.to_thread(self._post, payload)

    async def download(self) -> Optional[dict[str, Any]]:
        return await asyncio.to_thread(self._get)

    def _post(self, payload: dict[str, Any]) -> None:
        try:
            response = self._session.post(
                self.endpoint,
                json=payload,
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as e:
            raise TransportError(f"Server unreachable: {e}") from e

        if not response.ok:
            raise TransportError(
                f"Server error: {response.status_code}",
                status_code=response.status_code,
            )
        logger.info("rest_upload_succeeded", endpoint=self.endpoint)

    def _get(self) -> Optional[dict[str, Any]]:
        try:
            response = self._session.get(
                self.endpoint,
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as e:
            raise TransportError(f"Server unreachable: {e}") from e

        if response.status_code == 404:
            logger.info("rest_snapshot_missing", endpoint=self.endpoint)
            return None
        if not response.ok:
            raise TransportError(
                f"Server error: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Server returned invalid JSON: {e}") from e
