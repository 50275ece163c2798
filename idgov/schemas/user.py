"""Pydantic schemas for users; password hashes are never serialized."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from idgov.models.user import UserRole


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    email: str = Field(..., max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = Field(default=UserRole.CUSTOMER)
    tenant_id: int | None = None


class RegisterRequest(UserCreate):
    """Self-registration payload; only customers may register without an admin session."""


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=255)
    password: str | None = Field(default=None, min_length=6, max_length=128)
    email: str | None = Field(default=None, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    role: UserRole | None = None
    tenant_id: int | None = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: str
    role: UserRole
    tenant_id: int | None
    created_at: datetime


class UserSummary(BaseModel):
    """Minimal author projection attached to thread messages."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    role: UserRole


__all__ = ["RegisterRequest", "UserCreate", "UserRead", "UserSummary", "UserUpdate"]
