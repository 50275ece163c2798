"""Tenant question assignment and status endpoints."""
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session, get_file_storage, get_notification_dispatcher
from idgov.api.routes.auth import get_current_user, require_role
from idgov.models import UserRole
from idgov.schemas import (
    AssignmentRequest,
    BulkAssignmentRequest,
    BulkAssignmentResponse,
    StatusUpdateRequest,
    TenantQuestionDetail,
    TenantQuestionRead,
)
from idgov.services.access import Principal, ThreadAction, ensure_allowed
from idgov.services.assignments import (
    assign_question,
    assign_questions,
    list_tenant_questions,
    set_status,
    sort_by_status,
    unassign_question,
)
from idgov.services.file_storage import FileStorage
from idgov.services.notifications import NotificationDispatcher, NotificationKind
from idgov.services.threads import collect_storage_keys, remove_stored_files

router = APIRouter()
require_admin = require_role(UserRole.ADMIN)


@router.get("/tenant/{tenant_id}/questions", response_model=list[TenantQuestionDetail])
def read_tenant_questions(
    tenant_id: int,
    sort: Literal["status"] | None = None,
    session: Session = Depends(get_db_session),
    user: Principal = Depends(get_current_user),
) -> list[TenantQuestionDetail]:
    """List a tenant's assignments with question and domain; ``sort=status`` puts open work first."""

    ensure_allowed(user, ThreadAction.READ, tenant_id=tenant_id)
    tenant_questions = list_tenant_questions(session, tenant_id=tenant_id)
    if sort == "status":
        tenant_questions = sort_by_status(tenant_questions)
    return [TenantQuestionDetail.model_validate(item) for item in tenant_questions]


@router.post("/admin/tenant-questions", response_model=TenantQuestionRead, status_code=status.HTTP_201_CREATED)
def add_assignment(
    payload: AssignmentRequest,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> TenantQuestionRead:
    tenant_question = assign_question(session, tenant_id=payload.tenant_id, question_id=payload.question_id)
    return TenantQuestionRead.model_validate(tenant_question)


@router.post(
    "/admin/tenant-questions/bulk",
    response_model=BulkAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_assignments(
    payload: BulkAssignmentRequest,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> BulkAssignmentResponse:
    batch = assign_questions(session, tenant_id=payload.tenant_id, question_ids=payload.question_ids)
    return BulkAssignmentResponse(
        created=[TenantQuestionRead.model_validate(item) for item in batch.created],
        skipped_question_ids=batch.skipped_question_ids,
    )


@router.delete("/admin/tenant-questions/{tenant_question_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_assignment(
    tenant_question_id: int,
    session: Session = Depends(get_db_session),
    storage: FileStorage = Depends(get_file_storage),
    _: Principal = Depends(require_admin),
) -> Response:
    storage_keys = collect_storage_keys(session, tenant_question_id=tenant_question_id)
    unassign_question(session, tenant_question_id=tenant_question_id)
    remove_stored_files(storage, storage_keys)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/tenant/{tenant_id}/questions/{tenant_question_id}/status", response_model=TenantQuestionRead)
def update_status(
    tenant_id: int,
    tenant_question_id: int,
    payload: StatusUpdateRequest,
    session: Session = Depends(get_db_session),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    user: Principal = Depends(get_current_user),
) -> TenantQuestionRead:
    tenant_question = set_status(
        session,
        tenant_question_id=tenant_question_id,
        status=payload.status,
        principal=user,
        tenant_id=tenant_id,
    )
    result = TenantQuestionRead.model_validate(tenant_question)
    dispatcher.notify_tenant(
        session,
        tenant_id=tenant_question.tenant_id,
        kind=NotificationKind.QUESTION_UPDATED,
        actor_id=user.id,
        question_title=tenant_question.question.title,
        tenant_question_id=tenant_question.id,
        extra={"status": tenant_question.status.value},
    )
    return result


__all__ = [
    "add_assignment",
    "add_assignments",
    "read_tenant_questions",
    "remove_assignment",
    "router",
    "update_status",
]
