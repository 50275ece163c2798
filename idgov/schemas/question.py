"""Pydantic schemas for the question pool and bulk import."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from idgov.schemas.domain import DomainRead


class QuestionBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    domain_id: int
    required: bool = False
    tags: list[str] = Field(default_factory=list)


class QuestionCreate(QuestionBase):
    pass


class QuestionUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    domain_id: int | None = None
    required: bool | None = None
    tags: list[str] | None = None


class QuestionRead(QuestionBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class QuestionWithDomain(QuestionRead):
    domain: DomainRead


class BulkImportRequest(BaseModel):
    questions: list[Any] = Field(..., description="Rows mapped from the spreadsheet columns")


class BulkImportRowResult(BaseModel):
    success: bool
    question: QuestionRead | None = None
    error: str | None = None
    data: dict[str, Any] | None = None


class BulkImportResponse(BaseModel):
    message: str
    total_processed: int
    success_count: int
    error_count: int
    results: list[BulkImportRowResult]


__all__ = [
    "BulkImportRequest",
    "BulkImportResponse",
    "BulkImportRowResult",
    "QuestionBase",
    "QuestionCreate",
    "QuestionRead",
    "QuestionUpdate",
    "QuestionWithDomain",
]
