"""
WebDAV Sync Client

Mirrors the snapshot as one file in a user-supplied WebDAV folder:
    PUT <url>/<filename>          with Basic auth, body = snapshot JSON
    GET <url>/<filename>?t=<ms>   cache-busted; 404 means no snapshot yet
"""

import asyncio
import json
import time
from typing import Any, Callable, Optional

import requests
import structlog
from requests.auth import HTTPBasicAuth

from weekly_keeper.config.settings import WebDAVSettings
from weekly_keeper.services.sync.interface import (
    InsecureEndpointError,
    RemoteSyncInterface,
    SyncNotConfiguredError,
    TransportError,
)


logger = structlog.get_logger(__name__)


class WebDAVSyncClient(RemoteSyncInterface):
    """requests-based WebDAV client, run off the event loop."""

    name = "webdav"

    def __init__(
        self,
        settings: WebDAVSettings,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._settings = settings
        self._session = session or requests.Session()
        self._clock = clock

    @property
    def file_url(self) -> str:
        """
        Raises:
            SyncNotConfiguredError: If no folder URL is configured
            InsecureEndpointError: If https is required and the URL is http
        """
        url = self._settings.url.strip()
        if not url:
            raise SyncNotConfiguredError("WebDAV URL is empty")
        if self._settings.require_https and url.lower().startswith("http:"):
            raise InsecureEndpointError(
                "A secure context cannot reach an http:// WebDAV endpoint; "
                "use an https:// URL"
            )
        if not url.endswith("/"):
            url += "/"
        return url + self._settings.filename

    @property
    def _auth(self) -> HTTPBasicAuth:
        return HTTPBasicAuth(self._settings.username, self._settings.password)

    async def upload(self, payload: dict[str, Any]) -> None:
        await asyncio.to_thread(self._put, payload)

    async def download(self) -> Optional[dict[str, Any]]:
        return await asyncio.to_thread(self._get)

    def _put(self, payload: dict[str, Any]) -> None:
        url = self.file_url
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        try:
            response = self._session.put(
                url,
                data=body,
                auth=self._auth,
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as e:
            raise TransportError(f"WebDAV unreachable: {e}") from e

        if not response.ok:
            raise TransportError(
                f"WebDAV upload failed: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
        logger.info("webdav_upload_succeeded", url=url, status=response.status_code)

    def _get(self) -> Optional[dict[str, Any]]:
        url = f"{self.file_url}?t={int(self._clock() * 1000)}"
        try:
            response = self._session.get(
                url,
                auth=self._auth,
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as e:
            raise TransportError(f"WebDAV unreachable: {e}") from e

        if response.status_code == 404:
            return None
        if not response.ok:
            raise TransportError(
                f"WebDAV download failed: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"WebDAV file is not valid JSON: {e}") from e
