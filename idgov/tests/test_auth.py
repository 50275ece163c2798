from collections.abc import Iterator
from typing import TYPE_CHECKING

import pytest
from jose import jwt
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from idgov.api.deps import get_db_session
from idgov.api.routes.auth import create_access_token
from idgov.core.config import get_settings
from idgov.main import app
from idgov.models import Base, Tenant, User, UserRole
from idgov.services.users import hash_password

if TYPE_CHECKING:
    from fastapi.testclient import TestClient

PASSWORD = "admin123"


@pytest.fixture()
def session() -> Iterator[Session]:
    engine = create_engine(
        "sqlite+pysqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    tenant = Tenant(name="Acme")
    session.add_all(
        [
            tenant,
            User(
                username="admin",
                hashed_password=hash_password(PASSWORD),
                email="admin@example.com",
                full_name="System Admin",
                role=UserRole.ADMIN,
            ),
        ]
    )
    session.commit()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture()
def client(session: Session) -> Iterator["TestClient"]:
    pytest.importorskip("fastapi")
    from fastapi.testclient import TestClient

    def override_get_db() -> Iterator[Session]:
        yield session

    app.dependency_overrides[get_db_session] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db_session, None)


def _login(client: "TestClient", username: str = "admin", password: str = PASSWORD):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_login_returns_signed_token(client: "TestClient") -> None:
    response = _login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "admin"
    assert "hashed_password" not in body["user"]

    settings = get_settings()
    payload = jwt.decode(body["access_token"], settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    assert payload["sub"] == str(body["user"]["id"])
    assert payload["role"] == "Admin"
    assert payload["type"] == "access"
    assert payload["exp"] - payload["iat"] == settings.access_token_expire_minutes * 60


def test_login_rejects_bad_credentials(client: "TestClient") -> None:
    assert _login(client, password="wrong").status_code == 401
    assert _login(client, username="nobody").status_code == 401


def test_me_reads_user_from_database(client: "TestClient", session: Session) -> None:
    token = _login(client).json()["access_token"]
    user = session.scalars(select(User).where(User.username == "admin")).one()
    user.full_name = "Renamed Admin"
    session.commit()

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["full_name"] == "Renamed Admin"


def test_token_for_deleted_user_is_rejected(client: "TestClient", session: Session) -> None:
    ghost = User(
        username="ghost",
        hashed_password="x",
        email="ghost@example.com",
        full_name="Ghost",
        role=UserRole.CONSULTANT,
    )
    session.add(ghost)
    session.commit()
    token = create_access_token(ghost)
    session.delete(ghost)
    session.commit()

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_register_customer_assigns_question_pool(client: "TestClient", session: Session) -> None:
    tenant = session.scalars(select(Tenant).where(Tenant.name == "Acme")).one()

    response = client.post(
        "/api/register",
        json={
            "username": "acme_lead",
            "password": "lead-pass",
            "email": "lead@acme.test",
            "full_name": "Acme Lead",
            "tenant_id": tenant.id,
        },
    )

    assert response.status_code == 201
    assert response.json()["role"] == "Customer"
    assert _login(client, "acme_lead", "lead-pass").status_code == 200


def test_register_privileged_role_requires_admin(client: "TestClient") -> None:
    payload = {
        "username": "sneaky",
        "password": "sneaky-pass",
        "email": "sneaky@example.com",
        "full_name": "Sneaky",
        "role": "Admin",
    }

    anonymous = client.post("/api/register", json=payload)
    token = _login(client).json()["access_token"]
    as_admin = client.post("/api/register", json=payload, headers={"Authorization": f"Bearer {token}"})

    assert anonymous.status_code == 403
    assert as_admin.status_code == 201
    assert as_admin.json()["role"] == "Admin"


def test_register_duplicate_username_conflicts(client: "TestClient") -> None:
    response = client.post(
        "/api/register",
        json={
            "username": "admin",
            "password": "other-pass",
            "email": "dup@example.com",
            "full_name": "Duplicate",
            "role": "Consultant",
        },
        headers={"Authorization": f"Bearer {_login(client).json()['access_token']}"},
    )

    assert response.status_code == 409
    assert response.json()["code"] == "duplicate_username"
