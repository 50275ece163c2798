"""Seed the default questionnaire domains and the bootstrap admin account."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from idgov.core.config import get_settings
from idgov.db.session import engine, get_session
from idgov.models import Base
from idgov.services.catalog import seed_default_domains
from idgov.services.users import ensure_default_admin

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed(session: Session) -> None:
    """Create whatever default data is missing; safe to run repeatedly."""

    created = seed_default_domains(session)
    logger.info("Created %d default domains", len(created))

    settings = get_settings()
    admin = ensure_default_admin(
        session,
        username=settings.default_admin_username,
        email=settings.default_admin_email,
        password=settings.default_admin_password,
    )
    logger.info("Admin account available as %s", admin.username)


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with get_session() as session:
        seed(session)


if __name__ == "__main__":
    main()
