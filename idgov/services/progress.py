"""Completion statistics and recent activity for tenant dashboards."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from idgov.core.errors import NotFoundError
from idgov.models import Domain, Question, Response, Tenant, TenantQuestion, TenantQuestionStatus, User, UserRole


@dataclass(slots=True, frozen=True)
class DomainProgress:
    domain_id: int
    domain: str
    icon: str | None
    answered: int
    total: int
    progress: int


@dataclass(slots=True, frozen=True)
class TenantProgress:
    overall_completion: int
    answered: int
    total_questions: int
    domain_progress: list[DomainProgress] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class ActivityUser:
    id: int
    full_name: str
    role: UserRole


@dataclass(slots=True, frozen=True)
class Activity:
    type: str
    response_id: int
    user: ActivityUser
    question_title: str
    tenant_question_id: int
    date: datetime


def completion_percentage(answered: int, total: int) -> int:
    """Whole-number percentage rounded half up, defined as 0 when nothing is assigned."""

    if total <= 0:
        return 0
    return (200 * answered + total) // (2 * total)


def _require_tenant(session: Session, tenant_id: int) -> None:
    if session.get(Tenant, tenant_id) is None:
        raise NotFoundError(f"Tenant '{tenant_id}' not found")


def get_tenant_progress(session: Session, *, tenant_id: int) -> TenantProgress:
    """Aggregate answered/total counts per domain for one tenant.

    Domains without any assignment for the tenant are left out entirely.
    """

    _require_tenant(session, tenant_id)
    answered_expr = func.sum(
        case((TenantQuestion.status == TenantQuestionStatus.ANSWERED, 1), else_=0)
    )
    statement = (
        select(
            Domain.id,
            Domain.name,
            Domain.icon,
            answered_expr.label("answered"),
            func.count(TenantQuestion.id).label("total"),
        )
        .join(Question, Question.id == TenantQuestion.question_id)
        .join(Domain, Domain.id == Question.domain_id)
        .where(TenantQuestion.tenant_id == tenant_id)
        .group_by(Domain.id, Domain.name, Domain.icon)
        .order_by(Domain.id)
    )

    domain_progress: list[DomainProgress] = []
    answered_total = 0
    question_total = 0
    for domain_id, name, icon, answered, total in session.execute(statement):
        answered = int(answered or 0)
        total = int(total or 0)
        answered_total += answered
        question_total += total
        domain_progress.append(
            DomainProgress(
                domain_id=domain_id,
                domain=name,
                icon=icon,
                answered=answered,
                total=total,
                progress=completion_percentage(answered, total),
            )
        )

    return TenantProgress(
        overall_completion=completion_percentage(answered_total, question_total),
        answered=answered_total,
        total_questions=question_total,
        domain_progress=domain_progress,
    )


def get_recent_activity(session: Session, *, tenant_id: int, limit: int = 5) -> list[Activity]:
    """Most recent responses across the tenant's threads, newest first."""

    _require_tenant(session, tenant_id)
    statement = (
        select(Response, User, Question.title, TenantQuestion.id)
        .join(TenantQuestion, TenantQuestion.id == Response.tenant_question_id)
        .join(Question, Question.id == TenantQuestion.question_id)
        .join(User, User.id == Response.user_id)
        .where(TenantQuestion.tenant_id == tenant_id)
        .order_by(Response.created_at.desc(), Response.id.desc())
        .limit(limit)
    )
    return [
        Activity(
            type="response",
            response_id=response.id,
            user=ActivityUser(id=user.id, full_name=user.full_name, role=user.role),
            question_title=title,
            tenant_question_id=tenant_question_id,
            date=response.created_at,
        )
        for response, user, title, tenant_question_id in session.execute(statement)
    ]


__all__ = [
    "Activity",
    "ActivityUser",
    "DomainProgress",
    "TenantProgress",
    "completion_percentage",
    "get_recent_activity",
    "get_tenant_progress",
]
