"""Tenant dashboard endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session
from idgov.api.routes.auth import get_current_user
from idgov.core.config import get_settings
from idgov.schemas import ActivityRead, DashboardRead, TenantProgressRead
from idgov.services.access import Principal, ThreadAction, ensure_allowed
from idgov.services.progress import get_recent_activity, get_tenant_progress

router = APIRouter()


@router.get("/tenant/{tenant_id}/dashboard", response_model=DashboardRead)
def read_dashboard(
    tenant_id: int,
    session: Session = Depends(get_db_session),
    user: Principal = Depends(get_current_user),
) -> DashboardRead:
    ensure_allowed(user, ThreadAction.READ, tenant_id=tenant_id)
    progress = get_tenant_progress(session, tenant_id=tenant_id)
    activities = get_recent_activity(session, tenant_id=tenant_id, limit=get_settings().recent_activity_limit)
    return DashboardRead(
        progress=TenantProgressRead.model_validate(progress),
        recent_activities=[ActivityRead.model_validate(item) for item in activities],
    )


__all__ = ["read_dashboard", "router"]
