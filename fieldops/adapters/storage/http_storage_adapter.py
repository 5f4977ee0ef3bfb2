"""HTTP bucket object store (Supabase Storage API) — implements FileStoragePort."""

from __future__ import annotations

import logging

import httpx

from fieldops.application.errors import StorageError
from fieldops.application.ports.file_storage_port import FileStoragePort
from fieldops.config import settings

logger = logging.getLogger(__name__)


class HttpObjectStorageAdapter(FileStoragePort):
    """Uploads to ``<api>/storage/v1/object/<bucket>/<path>`` and returns the public URL.

    Replaced files are not garbage-collected.
    """

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        bucket: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_url = (api_url or settings.storage_api_url).rstrip("/")
        self._api_key = api_key or settings.storage_api_key
        self._bucket = bucket or settings.storage_bucket
        self._timeout = timeout
        self._transport = transport

    def public_url(self, path: str) -> str:
        return f"{self._api_url}/storage/v1/object/public/{self._bucket}/{path}"

    async def upload(self, path: str, data: bytes, content_type: str | None = None) -> str:
        if not self._api_url:
            raise StorageError("Object storage API URL is not configured")

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "apikey": self._api_key,
            "Content-Type": content_type or "application/octet-stream",
            "x-upsert": "true",
        }
        url = f"{self._api_url}/storage/v1/object/{self._bucket}/{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(url, content=data, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.exception("Storage upload failed for '%s'", path)
            raise StorageError(f"Upload failed for {path}: {e}") from e

        logger.info("Uploaded %d bytes to bucket '%s' at '%s'", len(data), self._bucket, path)
        return self.public_url(path)
