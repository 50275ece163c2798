"""Pydantic schemas for tenant resources."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TenantBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    industry: str | None = Field(default=None, max_length=255)


class TenantCreate(TenantBase):
    assign_all_questions: bool = Field(
        default=False, description="Assign every question of the pool to the new tenant"
    )


class TenantUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    industry: str | None = Field(default=None, max_length=255)


class TenantRead(TenantBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


__all__ = ["TenantBase", "TenantCreate", "TenantRead", "TenantUpdate"]
