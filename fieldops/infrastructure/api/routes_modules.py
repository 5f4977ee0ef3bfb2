"""Module endpoints — installed modules and the module catalog."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.adapters.persistence.database import get_session
from fieldops.adapters.persistence.repositories import (
    SqlDocumentRepository,
    SqlModuleRepository,
    SqlModuleTypeRepository,
)
from fieldops.application.errors import EntityNotFoundError
from fieldops.application.use_cases.cascade_delete import DeleteModuleUseCase
from fieldops.application.use_cases.modules import CreateModuleTypeUseCase, RegisterModuleUseCase
from fieldops.domain.value_objects.geo_point import GeoPoint
from fieldops.infrastructure.api.dependencies import (
    get_create_module_type_uc,
    get_delete_module_uc,
    get_document_repo,
    get_module_repo,
    get_module_type_repo,
    get_register_module_uc,
)
from fieldops.infrastructure.api.serializers import (
    serialize_deletion,
    serialize_document,
    serialize_module,
    serialize_module_type,
)
from fieldops.infrastructure.api.uploads import to_file_upload

router = APIRouter(tags=["modules"])


class ModuleCreate(BaseModel):
    client_id: int
    module_type_id: int
    serial_number: str
    installation_date: date
    delivery_date: date | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    address: str | None = None


# ─── Installed modules ───────────────────────────────────────────────


@router.get("/modules")
async def list_modules(repo: SqlModuleRepository = Depends(get_module_repo)):
    modules = await repo.get_all()
    return {"total": len(modules), "modules": [serialize_module(m) for m in modules]}


@router.post("/modules", status_code=201)
async def create_module(
    body: ModuleCreate,
    uc: RegisterModuleUseCase = Depends(get_register_module_uc),
    session: AsyncSession = Depends(get_session),
):
    """Install a catalog module at a client site; warranty is computed."""
    module = await uc.execute(
        client_id=body.client_id,
        module_type_id=body.module_type_id,
        serial_number=body.serial_number,
        installation_date=body.installation_date,
        delivery_date=body.delivery_date,
        location=GeoPoint.from_optional(body.latitude, body.longitude),
        address=body.address,
    )
    await session.commit()
    return serialize_module(module)


@router.get("/modules/{module_id}")
async def get_module(module_id: int, repo: SqlModuleRepository = Depends(get_module_repo)):
    module = await repo.get_by_id(module_id)
    if module is None:
        raise EntityNotFoundError("Module", module_id)
    return serialize_module(module)


@router.delete("/modules/{module_id}")
async def delete_module(
    module_id: int,
    uc: DeleteModuleUseCase = Depends(get_delete_module_uc),
    session: AsyncSession = Depends(get_session),
):
    """Delete the module together with its tickets and documents."""
    result = await uc.execute(module_id)
    await session.commit()
    return serialize_deletion(result)


# ─── Catalog ─────────────────────────────────────────────────────────


@router.get("/module-types")
async def list_module_types(repo: SqlModuleTypeRepository = Depends(get_module_type_repo)):
    types = await repo.get_all()
    return {"total": len(types), "module_types": [serialize_module_type(t) for t in types]}


@router.post("/module-types", status_code=201)
async def create_module_type(
    name: str = Form(...),
    description: str = Form(""),
    image: UploadFile | None = File(None),
    uc: CreateModuleTypeUseCase = Depends(get_create_module_type_uc),
    session: AsyncSession = Depends(get_session),
):
    upload = await to_file_upload(image) if image is not None and image.filename else None
    module_type = await uc.execute(name=name, description=description, image=upload)
    await session.commit()
    return serialize_module_type(module_type)


@router.get("/module-types/{module_type_id}")
async def get_module_type(
    module_type_id: int,
    repo: SqlModuleTypeRepository = Depends(get_module_type_repo),
    documents: SqlDocumentRepository = Depends(get_document_repo),
):
    """Catalog entry with its model-level documents (manuals, plans)."""
    module_type = await repo.get_by_id(module_type_id)
    if module_type is None:
        raise EntityNotFoundError("ModuleType", module_type_id)
    docs = await documents.get_by_module_type(module_type_id)
    return {
        **serialize_module_type(module_type),
        "documents": [serialize_document(d) for d in docs],
    }


@router.delete("/module-types/{module_type_id}", status_code=204)
async def delete_module_type(
    module_type_id: int,
    repo: SqlModuleTypeRepository = Depends(get_module_type_repo),
    session: AsyncSession = Depends(get_session),
):
    if not await repo.delete(module_type_id):
        raise EntityNotFoundError("ModuleType", module_type_id)
    await session.commit()
