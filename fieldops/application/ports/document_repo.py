"""Port interface for document library persistence."""

from abc import ABC, abstractmethod

from fieldops.domain.entities.document import Document


class DocumentRepository(ABC):
    @abstractmethod
    async def save(self, document: Document) -> Document:
        ...

    @abstractmethod
    async def get_by_id(self, document_id: int) -> Document | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[Document]:
        """Return every document, newest first, with module serial / client name."""
        ...

    @abstractmethod
    async def get_by_module_type(self, module_type_id: int) -> list[Document]:
        ...

    @abstractmethod
    async def get_related_to_client(
        self, client_id: int, module_ids: list[int], module_type_ids: list[int]
    ) -> list[Document]:
        """Documents attached to the client, one of its modules, or a type it owns."""
        ...

    @abstractmethod
    async def delete(self, document_id: int) -> bool:
        ...

    @abstractmethod
    async def delete_by_client(self, client_id: int) -> int:
        ...

    @abstractmethod
    async def delete_by_module(self, module_id: int) -> int:
        ...

    @abstractmethod
    async def count(
        self, *, client_id: int | None = None, module_id: int | None = None
    ) -> int:
        ...
