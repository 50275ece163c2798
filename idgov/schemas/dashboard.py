"""Schemas for the tenant dashboard."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from idgov.schemas.user import UserSummary


class DomainProgressRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    domain_id: int
    domain: str
    icon: str | None
    answered: int
    total: int
    progress: int


class TenantProgressRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    overall_completion: int
    answered: int
    total_questions: int
    domain_progress: list[DomainProgressRead]


class ActivityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    response_id: int
    user: UserSummary
    question_title: str
    tenant_question_id: int
    date: datetime


class DashboardRead(BaseModel):
    progress: TenantProgressRead
    recent_activities: list[ActivityRead]


__all__ = ["ActivityRead", "DashboardRead", "DomainProgressRead", "TenantProgressRead"]
