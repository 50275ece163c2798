"""Schemas for tenant question assignments."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from idgov.models.tenant_question import TenantQuestionStatus
from idgov.schemas.question import QuestionWithDomain


class AssignmentRequest(BaseModel):
    tenant_id: int
    question_id: int


class BulkAssignmentRequest(BaseModel):
    tenant_id: int
    question_ids: list[int] = Field(..., min_length=1)


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., description="One of Unanswered, In Progress, Answered")


class TenantQuestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    question_id: int
    status: TenantQuestionStatus
    last_updated: datetime


class TenantQuestionDetail(TenantQuestionRead):
    question: QuestionWithDomain


class BulkAssignmentResponse(BaseModel):
    created: list[TenantQuestionRead]
    skipped_question_ids: list[int]


__all__ = [
    "AssignmentRequest",
    "BulkAssignmentRequest",
    "BulkAssignmentResponse",
    "StatusUpdateRequest",
    "TenantQuestionDetail",
    "TenantQuestionRead",
]
