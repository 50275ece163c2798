"""Pydantic schemas for questionnaire domains."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from idgov.models.domain import DEFAULT_DOMAIN_ICON


class DomainBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    icon: str | None = Field(default=DEFAULT_DOMAIN_ICON, max_length=50)


class DomainCreate(DomainBase):
    pass


class DomainUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=50)


class DomainRead(DomainBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


__all__ = ["DomainBase", "DomainCreate", "DomainRead", "DomainUpdate"]
