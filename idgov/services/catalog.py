"""Domains and the global question pool."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from idgov.core.errors import NotFoundError, ValidationError
from idgov.models import DEFAULT_DOMAIN_ICON, Domain, Question
from idgov.services.file_storage import FileStorage
from idgov.services.threads import collect_storage_keys, remove_stored_files

logger = logging.getLogger(__name__)

DEFAULT_DOMAINS: tuple[tuple[str, str, str], ...] = (
    ("Access Reviews", "Periodic certification of user entitlements", "security"),
    ("Generic Governance", "Policies, ownership and governance processes", "gavel"),
    ("Application Onboarding", "Bringing applications under identity governance", "app_registration"),
    ("SOD", "Segregation of duties rules and conflicts", "people"),
    ("AD & Directory Services", "Active Directory and directory service integration", "folder_shared"),
)


def get_domain(session: Session, domain_id: int) -> Domain:
    domain = session.get(Domain, domain_id)
    if domain is None:
        raise NotFoundError(f"Domain '{domain_id}' not found")
    return domain


def list_domains(session: Session) -> list[Domain]:
    return list(session.scalars(select(Domain).order_by(Domain.id)).all())


def create_domain(
    session: Session, *, name: str, description: str | None = None, icon: str | None = None
) -> Domain:
    domain = Domain(name=name, description=description, icon=icon or DEFAULT_DOMAIN_ICON)
    session.add(domain)
    session.commit()
    session.refresh(domain)
    return domain


def update_domain(session: Session, *, domain_id: int, changes: dict[str, Any]) -> Domain:
    domain = get_domain(session, domain_id)
    for field_name, value in changes.items():
        setattr(domain, field_name, value)
    session.commit()
    session.refresh(domain)
    return domain


def delete_domain(session: Session, *, domain_id: int, storage: FileStorage) -> None:
    domain = get_domain(session, domain_id)
    storage_keys = collect_storage_keys(session, domain_id=domain.id)
    session.delete(domain)
    session.commit()
    remove_stored_files(storage, storage_keys)


def seed_default_domains(session: Session) -> list[Domain]:
    """Create the default domains that are missing; existing names are left alone."""

    existing = set(session.scalars(select(Domain.name)))
    created: list[Domain] = []
    for name, description, icon in DEFAULT_DOMAINS:
        if name in existing:
            continue
        domain = Domain(name=name, description=description, icon=icon)
        session.add(domain)
        created.append(domain)
    session.commit()
    return created


def _require_domain_reference(session: Session, domain_id: int) -> None:
    if session.get(Domain, domain_id) is None:
        raise ValidationError(f"Domain '{domain_id}' does not exist")


def get_question(session: Session, question_id: int) -> Question:
    question = session.scalar(
        select(Question).options(selectinload(Question.domain)).where(Question.id == question_id)
    )
    if question is None:
        raise NotFoundError(f"Question '{question_id}' not found")
    return question


def list_questions(session: Session, *, domain_id: int | None = None) -> list[Question]:
    statement = select(Question).options(selectinload(Question.domain)).order_by(Question.id)
    if domain_id is not None:
        statement = statement.where(Question.domain_id == domain_id)
    return list(session.scalars(statement).all())


def create_question(
    session: Session,
    *,
    title: str,
    domain_id: int,
    description: str | None = None,
    required: bool = False,
    tags: list[str] | None = None,
) -> Question:
    _require_domain_reference(session, domain_id)
    question = Question(
        title=title,
        description=description,
        domain_id=domain_id,
        required=required,
        tags=list(tags or []),
    )
    session.add(question)
    session.commit()
    logger.info("created question", extra={"question_id": question.id, "domain_id": domain_id})
    return get_question(session, question.id)


def update_question(session: Session, *, question_id: int, changes: dict[str, Any]) -> Question:
    question = get_question(session, question_id)
    if "domain_id" in changes:
        _require_domain_reference(session, changes["domain_id"])
    for field_name, value in changes.items():
        setattr(question, field_name, value)
    question.updated_at = datetime.now(timezone.utc)
    session.commit()
    return get_question(session, question.id)


def delete_question(session: Session, *, question_id: int, storage: FileStorage) -> None:
    question = get_question(session, question_id)
    storage_keys = collect_storage_keys(session, question_id=question.id)
    session.delete(question)
    session.commit()
    remove_stored_files(storage, storage_keys)


__all__ = [
    "DEFAULT_DOMAINS",
    "create_domain",
    "create_question",
    "delete_domain",
    "delete_question",
    "get_domain",
    "get_question",
    "list_domains",
    "list_questions",
    "seed_default_domains",
    "update_domain",
    "update_question",
]
