"""Tenant ORM model."""
from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from idgov.models.base import Base, CreatedAtMixin


class Tenant(CreatedAtMixin, Base):
    """A customer organization; the unit of data isolation."""

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    industry: Mapped[str | None] = mapped_column(String(255))

    users = relationship(
        "User", back_populates="tenant", cascade="all, delete-orphan", passive_deletes=True
    )
    tenant_questions = relationship(
        "TenantQuestion",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TenantQuestion.id",
    )


__all__ = ["Tenant"]
