"""Question ORM model."""
from __future__ import annotations

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from idgov.models.base import Base, TimestampMixin


class Question(TimestampMixin, Base):
    """A question in the global pool, owned by one domain."""

    __tablename__ = "questions"
    __table_args__ = (Index("ix_questions_domain_id", "domain_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    domain_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("domains.id", ondelete="CASCADE"), nullable=False
    )
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    domain = relationship("Domain", back_populates="questions")
    tenant_questions = relationship(
        "TenantQuestion", back_populates="question", cascade="all, delete-orphan", passive_deletes=True
    )


__all__ = ["Question"]
