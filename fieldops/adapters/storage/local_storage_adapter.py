"""Local filesystem object store — implements FileStoragePort."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from fieldops.application.errors import StorageError
from fieldops.application.ports.file_storage_port import FileStoragePort
from fieldops.config import settings

logger = logging.getLogger(__name__)


def _write_file(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)


class LocalFileStorageAdapter(FileStoragePort):
    """Writes uploads under a directory served at ``public_url``.

    Disk writes run in a worker thread so the event loop keeps serving.
    """

    def __init__(self, base_dir: str | Path | None = None, public_url: str | None = None):
        self._base_dir = Path(base_dir or settings.storage_dir).resolve()
        self._public_url = (public_url or settings.storage_public_url).rstrip("/")

    async def upload(self, path: str, data: bytes, content_type: str | None = None) -> str:
        target = (self._base_dir / path).resolve()
        if not target.is_relative_to(self._base_dir):
            raise StorageError(f"Refusing to write outside the storage directory: {path}")

        try:
            await asyncio.to_thread(_write_file, target, data)
        except OSError as e:
            logger.exception("Storage write failed for '%s'", path)
            raise StorageError(f"Upload failed for {path}: {e}") from e

        logger.info("Stored %d bytes at '%s'", len(data), path)
        return f"{self._public_url}/{path}"
