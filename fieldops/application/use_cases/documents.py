"""Document library use cases — upload new files and link existing ones."""

from __future__ import annotations

import logging
from datetime import datetime

from fieldops.application.errors import EntityNotFoundError
from fieldops.application.ports.client_repo import ClientRepository
from fieldops.application.ports.document_repo import DocumentRepository
from fieldops.application.ports.file_storage_port import FileStoragePort, FileUpload
from fieldops.application.ports.module_repo import ModuleRepository, ModuleTypeRepository
from fieldops.domain.entities.document import Document
from fieldops.domain.policies.file_names import timestamped_path
from fieldops.domain.value_objects.enums import DocumentTarget, DocumentType

logger = logging.getLogger(__name__)


class UploadDocumentUseCase:
    def __init__(
        self,
        document_repo: DocumentRepository,
        storage: FileStoragePort,
        client_repo: ClientRepository,
        module_repo: ModuleRepository,
        module_type_repo: ModuleTypeRepository,
    ):
        self._documents = document_repo
        self._storage = storage
        self._clients = client_repo
        self._modules = module_repo
        self._module_types = module_type_repo

    async def _ensure_target(self, target: DocumentTarget, target_id: int) -> None:
        if target == DocumentTarget.MODULE:
            found = await self._modules.get_by_id(target_id)
        elif target == DocumentTarget.MODULE_TYPE:
            found = await self._module_types.get_by_id(target_id)
        else:
            found = await self._clients.get_by_id(target_id)
        if found is None:
            raise EntityNotFoundError(target.value, target_id)

    async def execute(
        self,
        target: DocumentTarget,
        target_id: int,
        doc_type: DocumentType,
        file: FileUpload,
        version: str | None = None,
    ) -> Document:
        """Upload to ``documents/<target>/<id>/<ts>_<name>`` then insert the record.

        An orphaned blob is left behind if the insert fails.
        """
        await self._ensure_target(target, target_id)

        path = timestamped_path(f"documents/{target.value}/{target_id}", file.name)
        url = await self._storage.upload(path, file.data, file.content_type)

        document = Document(
            id=None,
            name=file.name,
            type=doc_type,
            url=url,
            version=version or None,
            uploaded_at=datetime.now(),
        )
        document.attach_to(target, target_id)
        document = await self._documents.save(document)
        logger.info("Document %d stored for %s %d", document.id, target.value, target_id)
        return document


def unique_by_url(documents: list[Document]) -> list[Document]:
    """One record per stored file, keeping the first occurrence."""
    seen: dict[str, Document] = {}
    for document in documents:
        seen.setdefault(document.url, document)
    return list(seen.values())


class LinkDocumentsUseCase:
    """Reuse files already in the library for another client or module.

    Linking copies the document record (name, type, version, url) onto the
    target; the stored file is shared, never re-uploaded.
    """

    def __init__(
        self,
        document_repo: DocumentRepository,
        client_repo: ClientRepository,
        module_repo: ModuleRepository,
    ):
        self._documents = document_repo
        self._clients = client_repo
        self._modules = module_repo

    async def library(self, search: str | None = None) -> list[Document]:
        """Distinct files of the library, optionally filtered by name or type."""
        documents = unique_by_url(await self._documents.get_all())
        term = (search or "").strip().lower()
        if not term:
            return documents
        return [
            d for d in documents if term in d.name.lower() or term in d.type.value.lower()
        ]

    async def _resolve_target(
        self, client_id: int | None, module_id: int | None
    ) -> tuple[DocumentTarget, int]:
        if (client_id is None) == (module_id is None):
            raise ValueError("Link documents to exactly one client or module")
        if client_id is not None:
            if await self._clients.get_by_id(client_id) is None:
                raise EntityNotFoundError("Client", client_id)
            return DocumentTarget.CLIENT, client_id
        if await self._modules.get_by_id(module_id) is None:
            raise EntityNotFoundError("Module", module_id)
        return DocumentTarget.MODULE, module_id

    async def execute(
        self,
        document_ids: list[int],
        client_id: int | None = None,
        module_id: int | None = None,
    ) -> list[Document]:
        if not document_ids:
            raise ValueError("No documents selected")
        target, target_id = await self._resolve_target(client_id, module_id)

        sources = []
        for document_id in document_ids:
            source = await self._documents.get_by_id(document_id)
            if source is None:
                raise EntityNotFoundError("Document", document_id)
            sources.append(source)

        linked = []
        for source in unique_by_url(sources):
            copy = Document(
                id=None,
                name=source.name,
                type=source.type,
                url=source.url,
                version=source.version,
                uploaded_at=datetime.now(),
            )
            copy.attach_to(target, target_id)
            linked.append(await self._documents.save(copy))

        logger.info(
            "Linked %d document(s) to %s %d", len(linked), target.value, target_id
        )
        return linked
