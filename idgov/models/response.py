"""Thread response ORM model."""
from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from idgov.models.base import Base, CreatedAtMixin


class Response(CreatedAtMixin, Base):
    """A single message in the thread of a tenant question."""

    __tablename__ = "responses"
    __table_args__ = (Index("ix_responses_tenant_question_id", "tenant_question_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tenant_questions.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    tenant_question = relationship("TenantQuestion", back_populates="responses")
    user = relationship("User", back_populates="responses")
    attachments = relationship(
        "Attachment",
        back_populates="response",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Attachment.id",
    )


__all__ = ["Response"]
