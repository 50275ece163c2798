"""Response attachment ORM model."""
from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from idgov.models.base import Base, CreatedAtMixin


class Attachment(CreatedAtMixin, Base):
    """Metadata for a file stored by the file storage collaborator."""

    __tablename__ = "attachments"
    __table_args__ = (Index("ix_attachments_response_id", "response_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    response_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("responses.id", ondelete="CASCADE"), nullable=False
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)

    response = relationship("Response", back_populates="attachments")


__all__ = ["Attachment"]
