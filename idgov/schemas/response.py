"""Schemas for thread responses and attachments."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from idgov.schemas.user import UserSummary


class ResponseCreate(BaseModel):
    content: str


class ResponseUpdate(BaseModel):
    content: str


class AttachmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    response_id: int
    filename: str
    original_name: str
    mime_type: str
    size: int
    created_at: datetime


class ResponseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_question_id: int
    user_id: int
    content: str
    created_at: datetime
    user: UserSummary | None
    attachments: list[AttachmentRead]


__all__ = ["AttachmentRead", "ResponseCreate", "ResponseRead", "ResponseUpdate"]
