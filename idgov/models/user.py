"""User ORM model."""
from __future__ import annotations

import enum

from sqlalchemy import Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from idgov.models.base import Base, CreatedAtMixin


class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    CONSULTANT = "Consultant"
    CUSTOMER = "Customer"


class User(CreatedAtMixin, Base):
    """A platform user; customers are bound to exactly one tenant."""

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_tenant_id", "tenant_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"), nullable=False, default=UserRole.CUSTOMER
    )
    tenant_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True
    )

    tenant = relationship("Tenant", back_populates="users")
    responses = relationship(
        "Response", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


__all__ = ["User", "UserRole"]
