"""Questionnaire domain ORM model."""
from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from idgov.models.base import Base

DEFAULT_DOMAIN_ICON = "help_outline"


class Domain(Base):
    """A global topical category for questions."""

    __tablename__ = "domains"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    icon: Mapped[str | None] = mapped_column(String(50), default=DEFAULT_DOMAIN_ICON)

    questions = relationship(
        "Question", back_populates="domain", cascade="all, delete-orphan", passive_deletes=True
    )


__all__ = ["DEFAULT_DOMAIN_ICON", "Domain"]
