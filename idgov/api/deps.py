"""Common dependencies for API routes."""
from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache

from sqlalchemy.orm import Session

from idgov.core.config import get_settings
from idgov.db.session import SessionLocal
from idgov.services.file_storage import FileStorage, build_file_storage
from idgov.services.notifications import NotificationDispatcher, build_notifier


def get_db_session() -> Iterator[Session]:
    """Yield a database session for FastAPI dependencies."""

    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@lru_cache
def get_file_storage() -> FileStorage:
    """Attachment storage backend selected by ``file_storage_backend``."""

    return build_file_storage(get_settings())


@lru_cache
def get_notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(build_notifier(get_settings()))


__all__ = ["get_db_session", "get_file_storage", "get_notification_dispatcher"]
