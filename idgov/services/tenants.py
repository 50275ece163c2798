"""Tenant administration."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from idgov.core.errors import NotFoundError
from idgov.models import Tenant
from idgov.services.assignments import assign_default_questions
from idgov.services.file_storage import FileStorage
from idgov.services.threads import collect_storage_keys, remove_stored_files

logger = logging.getLogger(__name__)


def get_tenant(session: Session, tenant_id: int) -> Tenant:
    tenant = session.get(Tenant, tenant_id)
    if tenant is None:
        raise NotFoundError(f"Tenant '{tenant_id}' not found")
    return tenant


def list_tenants(session: Session) -> list[Tenant]:
    return list(session.scalars(select(Tenant).order_by(Tenant.id)).all())


def create_tenant(
    session: Session,
    *,
    name: str,
    description: str | None = None,
    industry: str | None = None,
    assign_all_questions: bool = False,
) -> Tenant:
    """Create a tenant, optionally assigning it the whole question pool."""

    tenant = Tenant(name=name, description=description, industry=industry)
    session.add(tenant)
    session.commit()
    session.refresh(tenant)
    logger.info("created tenant", extra={"tenant_id": tenant.id})

    if assign_all_questions:
        assign_default_questions(session, tenant_id=tenant.id)
    return tenant


def update_tenant(session: Session, *, tenant_id: int, changes: dict[str, Any]) -> Tenant:
    tenant = get_tenant(session, tenant_id)
    for field_name, value in changes.items():
        setattr(tenant, field_name, value)
    session.commit()
    session.refresh(tenant)
    return tenant


def delete_tenant(session: Session, *, tenant_id: int, storage: FileStorage) -> None:
    """Delete a tenant with its users, assignments and threads."""

    tenant = get_tenant(session, tenant_id)
    storage_keys = collect_storage_keys(session, tenant_id=tenant.id)
    session.delete(tenant)
    session.commit()
    remove_stored_files(storage, storage_keys)
    logger.info("deleted tenant", extra={"tenant_id": tenant_id, "removed_files": len(storage_keys)})


__all__ = ["create_tenant", "delete_tenant", "get_tenant", "list_tenants", "update_tenant"]
