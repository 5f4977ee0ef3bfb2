"""Port interface for the object store holding uploaded files."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class FileStoragePort(ABC):
    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str | None = None) -> str:
        """Store ``data`` under ``path`` and return its public URL.

        Raises:
            StorageError: if the upload fails.
        """
        ...


@dataclass(frozen=True)
class FileUpload:
    """An uploaded file as received from the client."""

    name: str
    data: bytes
    content_type: str | None = None
