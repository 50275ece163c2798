from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from idgov.core.errors import DuplicateUsernameError, NotFoundError, ValidationError
from idgov.models import UserRole
from idgov.services.users import (
    create_user,
    delete_user,
    ensure_default_admin,
    list_users,
    update_user,
    verify_password,
)


def test_create_user_hashes_password(db_session: Session, seeded: SimpleNamespace) -> None:
    user = create_user(
        db_session,
        username="new_customer",
        password="s3cret-value",
        email="new@acme.test",
        full_name="New Customer",
        role=UserRole.CUSTOMER,
        tenant_id=seeded.acme.id,
    )

    assert user.hashed_password != "s3cret-value"
    assert verify_password("s3cret-value", user.hashed_password)
    assert not verify_password("wrong", user.hashed_password)


def test_customer_requires_existing_tenant(db_session: Session, seeded: SimpleNamespace) -> None:
    with pytest.raises(ValidationError):
        create_user(
            db_session,
            username="floating",
            password="s3cret-value",
            email="floating@example.com",
            full_name="Floating Customer",
            role=UserRole.CUSTOMER,
            tenant_id=None,
        )
    with pytest.raises(ValidationError):
        create_user(
            db_session,
            username="ghost",
            password="s3cret-value",
            email="ghost@example.com",
            full_name="Ghost Customer",
            role=UserRole.CUSTOMER,
            tenant_id=777,
        )


def test_duplicate_username_is_rejected(db_session: Session, seeded: SimpleNamespace) -> None:
    with pytest.raises(DuplicateUsernameError):
        create_user(
            db_session,
            username=seeded.admin.username,
            password="s3cret-value",
            email="dup@example.com",
            full_name="Duplicate",
            role=UserRole.ADMIN,
            tenant_id=None,
        )


def test_list_users_uses_query_filters(db_session: Session, seeded: SimpleNamespace) -> None:
    everyone = list_users(db_session)
    acme_only = list_users(db_session, tenant_id=seeded.acme.id)

    assert len(everyone) == 5
    assert {user.username for user in acme_only} == {"acme_customer", "acme_colleague"}


def test_update_and_delete_user(db_session: Session, seeded: SimpleNamespace) -> None:
    user_id = seeded.consultant.id
    updated = update_user(db_session, user_id=user_id, changes={"full_name": "Senior Consultant", "password": "rotated-1"})

    assert updated.full_name == "Senior Consultant"
    assert verify_password("rotated-1", updated.hashed_password)

    with pytest.raises(ValidationError):
        update_user(db_session, user_id=seeded.acme_customer.id, changes={"tenant_id": None})

    delete_user(db_session, user_id=user_id)
    with pytest.raises(NotFoundError):
        update_user(db_session, user_id=user_id, changes={})


def test_default_admin_is_created_once(db_session: Session) -> None:
    first = ensure_default_admin(db_session, username="admin", email="admin@example.com", password="admin123")
    second = ensure_default_admin(db_session, username="admin", email="other@example.com", password="changed")

    assert first.id == second.id
    assert first.role is UserRole.ADMIN
    assert verify_password("admin123", second.hashed_password)
