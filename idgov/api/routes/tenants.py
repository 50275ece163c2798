"""Tenant administration endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session, get_file_storage
from idgov.api.routes.auth import require_role
from idgov.models import UserRole
from idgov.schemas import TenantCreate, TenantRead, TenantUpdate
from idgov.services.access import Principal
from idgov.services.file_storage import FileStorage
from idgov.services.tenants import create_tenant, delete_tenant, get_tenant, list_tenants, update_tenant

router = APIRouter(prefix="/admin/tenants")
require_admin = require_role(UserRole.ADMIN)


@router.get("", response_model=list[TenantRead])
def read_tenants(
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> list[TenantRead]:
    return [TenantRead.model_validate(tenant) for tenant in list_tenants(session)]


@router.post("", response_model=TenantRead, status_code=status.HTTP_201_CREATED)
def add_tenant(
    payload: TenantCreate,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> TenantRead:
    tenant = create_tenant(
        session,
        name=payload.name,
        description=payload.description,
        industry=payload.industry,
        assign_all_questions=payload.assign_all_questions,
    )
    return TenantRead.model_validate(tenant)


@router.get("/{tenant_id}", response_model=TenantRead)
def read_tenant(
    tenant_id: int,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> TenantRead:
    return TenantRead.model_validate(get_tenant(session, tenant_id))


@router.put("/{tenant_id}", response_model=TenantRead)
def edit_tenant(
    tenant_id: int,
    payload: TenantUpdate,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> TenantRead:
    tenant = update_tenant(session, tenant_id=tenant_id, changes=payload.model_dump(exclude_unset=True, exclude_none=True))
    return TenantRead.model_validate(tenant)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_tenant(
    tenant_id: int,
    session: Session = Depends(get_db_session),
    storage: FileStorage = Depends(get_file_storage),
    _: Principal = Depends(require_admin),
) -> Response:
    delete_tenant(session, tenant_id=tenant_id, storage=storage)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["add_tenant", "edit_tenant", "read_tenant", "read_tenants", "remove_tenant", "router"]
