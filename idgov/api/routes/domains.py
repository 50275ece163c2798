"""Domain listing and administration."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session, get_file_storage
from idgov.api.routes.auth import require_role
from idgov.models import UserRole
from idgov.schemas import DomainCreate, DomainRead, DomainUpdate
from idgov.services.access import Principal
from idgov.services.catalog import create_domain, delete_domain, list_domains, update_domain
from idgov.services.file_storage import FileStorage

router = APIRouter()
require_admin = require_role(UserRole.ADMIN)


@router.get("/domains", response_model=list[DomainRead], summary="List questionnaire domains")
def read_domains(session: Session = Depends(get_db_session)) -> list[DomainRead]:
    return [DomainRead.model_validate(domain) for domain in list_domains(session)]


@router.post("/admin/domains", response_model=DomainRead, status_code=status.HTTP_201_CREATED)
def add_domain(
    payload: DomainCreate,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> DomainRead:
    domain = create_domain(session, name=payload.name, description=payload.description, icon=payload.icon)
    return DomainRead.model_validate(domain)


@router.put("/admin/domains/{domain_id}", response_model=DomainRead)
def edit_domain(
    domain_id: int,
    payload: DomainUpdate,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> DomainRead:
    domain = update_domain(session, domain_id=domain_id, changes=payload.model_dump(exclude_unset=True, exclude_none=True))
    return DomainRead.model_validate(domain)


@router.delete("/admin/domains/{domain_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_domain(
    domain_id: int,
    session: Session = Depends(get_db_session),
    storage: FileStorage = Depends(get_file_storage),
    _: Principal = Depends(require_admin),
) -> Response:
    delete_domain(session, domain_id=domain_id, storage=storage)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["add_domain", "edit_domain", "read_domains", "remove_domain", "router"]
