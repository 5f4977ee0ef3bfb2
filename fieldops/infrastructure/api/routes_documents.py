"""Document library endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.persistence.database import get_session
from fieldops.adapters.persistence.repositories import SqlDocumentRepository
from fieldops.application.errors import EntityNotFoundError
from fieldops.application.use_cases.documents import LinkDocumentsUseCase, UploadDocumentUseCase
from fieldops.domain.value_objects.enums import DocumentTarget, DocumentType
from fieldops.infrastructure.api.dependencies import (
    get_document_repo,
    get_link_documents_uc,
    get_upload_document_uc,
)
from fieldops.infrastructure.api.serializers import serialize_document
from fieldops.infrastructure.api.uploads import to_file_upload

router = APIRouter(prefix="/documents", tags=["documents"])


class LinkRequest(BaseModel):
    document_ids: list[int] = Field(min_length=1)
    client_id: int | None = None
    module_id: int | None = None


@router.get("")
async def list_documents(repo: SqlDocumentRepository = Depends(get_document_repo)):
    """All documents with module serial and client name resolved."""
    documents = await repo.get_all()
    return {"total": len(documents), "documents": [serialize_document(d) for d in documents]}


@router.get("/library")
async def document_library(
    q: str | None = Query(None, description="Filter by name or type"),
    uc: LinkDocumentsUseCase = Depends(get_link_documents_uc),
):
    """Distinct stored files, one entry per URL, to pick from when linking."""
    documents = await uc.library(q)
    return {"total": len(documents), "documents": [serialize_document(d) for d in documents]}


@router.post("/link", status_code=201)
async def link_documents(
    body: LinkRequest,
    uc: LinkDocumentsUseCase = Depends(get_link_documents_uc),
    session: AsyncSession = Depends(get_session),
):
    """Attach existing files to a client or module without uploading them again."""
    linked = await uc.execute(body.document_ids, client_id=body.client_id, module_id=body.module_id)
    await session.commit()
    return {"total": len(linked), "documents": [serialize_document(d) for d in linked]}


@router.post("", status_code=201)
async def upload_document(
    target: DocumentTarget = Form(...),
    target_id: int = Form(...),
    type: DocumentType = Form(DocumentType.OTHER),
    version: str | None = Form(None),
    file: UploadFile = File(...),
    uc: UploadDocumentUseCase = Depends(get_upload_document_uc),
    session: AsyncSession = Depends(get_session),
):
    """Attach a file to exactly one module, module type or client."""
    document = await uc.execute(
        target=target,
        target_id=target_id,
        doc_type=type,
        file=await to_file_upload(file),
        version=version,
    )
    await session.commit()
    return serialize_document(document)


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: int,
    repo: SqlDocumentRepository = Depends(get_document_repo),
    session: AsyncSession = Depends(get_session),
):
    # The stored blob is not removed
    if not await repo.delete(document_id):
        raise EntityNotFoundError("Document", document_id)
    await session.commit()
