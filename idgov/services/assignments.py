"""Tenant question assignment and status management."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from idgov.core.errors import DuplicateAssignmentError, NotFoundError, ValidationError
from idgov.models import Question, Tenant, TenantQuestion, TenantQuestionStatus
from idgov.services.access import Principal, ThreadAction, ensure_allowed, is_allowed

logger = logging.getLogger(__name__)

STATUS_PRIORITY: dict[TenantQuestionStatus, int] = {
    TenantQuestionStatus.UNANSWERED: 0,
    TenantQuestionStatus.IN_PROGRESS: 1,
    TenantQuestionStatus.ANSWERED: 2,
}


@dataclass(slots=True)
class AssignmentBatch:
    """Outcome of assigning several questions to one tenant."""

    created: list[TenantQuestion] = field(default_factory=list)
    skipped_question_ids: list[int] = field(default_factory=list)


def parse_status(value: str | TenantQuestionStatus) -> TenantQuestionStatus:
    if isinstance(value, TenantQuestionStatus):
        return value
    try:
        return TenantQuestionStatus(value)
    except ValueError as exc:
        raise ValidationError("Invalid status") from exc


def _require_tenant(session: Session, tenant_id: int) -> Tenant:
    tenant = session.get(Tenant, tenant_id)
    if tenant is None:
        raise NotFoundError(f"Tenant '{tenant_id}' not found")
    return tenant


def _find_assignment(session: Session, *, tenant_id: int, question_id: int) -> TenantQuestion | None:
    statement = select(TenantQuestion).where(
        TenantQuestion.tenant_id == tenant_id, TenantQuestion.question_id == question_id
    )
    return session.scalar(statement)


def get_tenant_question(session: Session, tenant_question_id: int) -> TenantQuestion:
    tenant_question = session.get(TenantQuestion, tenant_question_id)
    if tenant_question is None:
        raise NotFoundError("Tenant question not found")
    return tenant_question


def assign_question(session: Session, *, tenant_id: int, question_id: int) -> TenantQuestion:
    """Assign a pool question to a tenant with status ``Unanswered``."""

    _require_tenant(session, tenant_id)
    if session.get(Question, question_id) is None:
        raise NotFoundError(f"Question '{question_id}' not found")

    if _find_assignment(session, tenant_id=tenant_id, question_id=question_id) is not None:
        raise DuplicateAssignmentError("This question is already assigned to the tenant")

    tenant_question = TenantQuestion(
        tenant_id=tenant_id,
        question_id=question_id,
        status=TenantQuestionStatus.UNANSWERED,
        last_updated=datetime.now(timezone.utc),
    )
    session.add(tenant_question)
    try:
        session.commit()
    except IntegrityError as exc:
        # a concurrent assignment won the race on the unique constraint
        session.rollback()
        raise DuplicateAssignmentError("This question is already assigned to the tenant") from exc

    session.refresh(tenant_question)
    logger.info(
        "assigned question to tenant",
        extra={"tenant_id": tenant_id, "question_id": question_id, "tenant_question_id": tenant_question.id},
    )
    return tenant_question


def assign_questions(
    session: Session, *, tenant_id: int, question_ids: Iterable[int]
) -> AssignmentBatch:
    """Assign several questions, skipping those already assigned."""

    _require_tenant(session, tenant_id)
    wanted = list(dict.fromkeys(question_ids))
    existing_questions = set(session.scalars(select(Question.id).where(Question.id.in_(wanted))))
    missing = [question_id for question_id in wanted if question_id not in existing_questions]
    if missing:
        raise NotFoundError(f"Questions not found: {', '.join(str(item) for item in missing)}")

    already_assigned = set(
        session.scalars(
            select(TenantQuestion.question_id).where(
                TenantQuestion.tenant_id == tenant_id, TenantQuestion.question_id.in_(wanted)
            )
        )
    )

    batch = AssignmentBatch()
    now = datetime.now(timezone.utc)
    for question_id in wanted:
        if question_id in already_assigned:
            batch.skipped_question_ids.append(question_id)
            continue
        tenant_question = TenantQuestion(
            tenant_id=tenant_id,
            question_id=question_id,
            status=TenantQuestionStatus.UNANSWERED,
            last_updated=now,
        )
        session.add(tenant_question)
        batch.created.append(tenant_question)

    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateAssignmentError("One or more questions were assigned concurrently") from exc

    for tenant_question in batch.created:
        session.refresh(tenant_question)
    logger.info(
        "bulk assigned questions",
        extra={
            "tenant_id": tenant_id,
            "created_count": len(batch.created),
            "skipped_count": len(batch.skipped_question_ids),
        },
    )
    return batch


def assign_default_questions(session: Session, *, tenant_id: int) -> AssignmentBatch:
    """Assign every pool question the tenant does not have yet."""

    question_ids = session.scalars(select(Question.id).order_by(Question.id)).all()
    return assign_questions(session, tenant_id=tenant_id, question_ids=question_ids)


def list_tenant_questions(session: Session, *, tenant_id: int) -> list[TenantQuestion]:
    """Return the tenant's assignments in assignment order, joined with question and domain."""

    _require_tenant(session, tenant_id)
    statement = (
        select(TenantQuestion)
        .options(joinedload(TenantQuestion.question).joinedload(Question.domain))
        .where(TenantQuestion.tenant_id == tenant_id)
        .order_by(TenantQuestion.id)
    )
    return list(session.scalars(statement).unique().all())


def sort_by_status(tenant_questions: Sequence[TenantQuestion]) -> list[TenantQuestion]:
    """Order Unanswered, In Progress, Answered; ties keep their original order."""

    return sorted(tenant_questions, key=lambda item: STATUS_PRIORITY[item.status])


def can_access_thread(session: Session, *, tenant_question_id: int, principal: Principal) -> bool:
    tenant_question = get_tenant_question(session, tenant_question_id)
    return is_allowed(principal, ThreadAction.READ, tenant_id=tenant_question.tenant_id)


def set_status(
    session: Session,
    *,
    tenant_question_id: int,
    status: str | TenantQuestionStatus,
    principal: Principal,
    tenant_id: int | None = None,
) -> TenantQuestion:
    """Update the answer status of an assignment.

    ``tenant_id`` scopes the lookup to a tenant when the caller addressed the
    assignment through a tenant path; a mismatch is reported as not found.
    """

    new_status = parse_status(status)
    tenant_question = get_tenant_question(session, tenant_question_id)
    if tenant_id is not None and tenant_question.tenant_id != tenant_id:
        raise NotFoundError("Tenant question not found")

    ensure_allowed(
        principal,
        ThreadAction.SET_STATUS,
        tenant_id=tenant_question.tenant_id,
        message="You don't have permission to update this question",
    )

    tenant_question.status = new_status
    tenant_question.last_updated = datetime.now(timezone.utc)
    session.commit()
    session.refresh(tenant_question)
    logger.info(
        "updated tenant question status",
        extra={"tenant_question_id": tenant_question.id, "status": new_status.value, "actor_id": principal.id},
    )
    return tenant_question


def unassign_question(session: Session, *, tenant_question_id: int) -> None:
    tenant_question = get_tenant_question(session, tenant_question_id)
    session.delete(tenant_question)
    session.commit()


__all__ = [
    "AssignmentBatch",
    "STATUS_PRIORITY",
    "assign_default_questions",
    "assign_question",
    "assign_questions",
    "can_access_thread",
    "get_tenant_question",
    "list_tenant_questions",
    "parse_status",
    "set_status",
    "sort_by_status",
    "unassign_question",
]
