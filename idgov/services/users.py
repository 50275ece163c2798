"""User management and password hashing."""
from __future__ import annotations

import logging
from typing import Any

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from idgov.core.errors import DuplicateUsernameError, NotFoundError, ValidationError
from idgov.models import Tenant, User, UserRole

logger = logging.getLogger(__name__)


def hash_password(raw_password: str) -> str:
    return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(raw_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(raw_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:  # pragma: no cover - invalid hash format
        return False


def _check_tenant_binding(session: Session, *, role: UserRole, tenant_id: int | None) -> None:
    if tenant_id is not None and session.get(Tenant, tenant_id) is None:
        raise ValidationError(f"Tenant '{tenant_id}' does not exist")
    if role is UserRole.CUSTOMER and tenant_id is None:
        raise ValidationError("Customer users must belong to a tenant")


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_user_by_username(session: Session, username: str) -> User | None:
    return session.scalar(select(User).where(User.username == username))


def list_users(session: Session, *, tenant_id: int | None = None) -> list[User]:
    statement = select(User).order_by(User.id)
    if tenant_id is not None:
        statement = statement.where(User.tenant_id == tenant_id)
    return list(session.scalars(statement).all())


def create_user(
    session: Session,
    *,
    username: str,
    password: str,
    email: str,
    full_name: str,
    role: UserRole,
    tenant_id: int | None,
) -> User:
    _check_tenant_binding(session, role=role, tenant_id=tenant_id)
    if get_user_by_username(session, username) is not None:
        raise DuplicateUsernameError("Username already exists")

    user = User(
        username=username,
        hashed_password=hash_password(password),
        email=email,
        full_name=full_name,
        role=role,
        tenant_id=tenant_id,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateUsernameError("Username already exists") from exc
    session.refresh(user)
    logger.info("created user", extra={"user_id": user.id, "role": role.value, "tenant_id": tenant_id})
    return user


def ensure_default_admin(session: Session, *, username: str, email: str, password: str) -> User:
    """Return the bootstrap admin, creating it when no user holds ``username``."""

    existing = get_user_by_username(session, username)
    if existing is not None:
        return existing
    return create_user(
        session,
        username=username,
        password=password,
        email=email,
        full_name="System Admin",
        role=UserRole.ADMIN,
        tenant_id=None,
    )


def update_user(session: Session, *, user_id: int, changes: dict[str, Any]) -> User:
    user = get_user(session, user_id)
    role = changes.get("role", user.role)
    tenant_id = changes.get("tenant_id", user.tenant_id)
    _check_tenant_binding(session, role=role, tenant_id=tenant_id)

    password = changes.pop("password", None)
    if password:
        user.hashed_password = hash_password(password)
    for field_name, value in changes.items():
        setattr(user, field_name, value)

    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateUsernameError("Username already exists") from exc
    session.refresh(user)
    return user


def delete_user(session: Session, *, user_id: int) -> None:
    user = get_user(session, user_id)
    session.delete(user)
    session.commit()


__all__ = [
    "create_user",
    "delete_user",
    "ensure_default_admin",
    "get_user",
    "get_user_by_username",
    "hash_password",
    "list_users",
    "update_user",
    "verify_password",
]
