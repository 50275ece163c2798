"""Tenant question assignment ORM model."""
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from idgov.models.base import Base


class TenantQuestionStatus(str, enum.Enum):
    UNANSWERED = "Unanswered"
    IN_PROGRESS = "In Progress"
    ANSWERED = "Answered"


class TenantQuestion(Base):
    """Assignment of one question to one tenant plus its answer progress."""

    __tablename__ = "tenant_questions"
    __table_args__ = (
        UniqueConstraint("tenant_id", "question_id", name="uq_tenant_questions_tenant_question"),
        Index("ix_tenant_questions_tenant_id", "tenant_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[TenantQuestionStatus] = mapped_column(
        Enum(TenantQuestionStatus, name="tenant_question_status"),
        nullable=False,
        default=TenantQuestionStatus.UNANSWERED,
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    tenant = relationship("Tenant", back_populates="tenant_questions")
    question = relationship("Question", back_populates="tenant_questions")
    responses = relationship(
        "Response",
        back_populates="tenant_question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Response.id",
    )


__all__ = ["TenantQuestion", "TenantQuestionStatus"]
