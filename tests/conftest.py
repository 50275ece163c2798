from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from io import BytesIO
from types import SimpleNamespace
from typing import Any

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from idgov.api.deps import get_db_session, get_file_storage, get_notification_dispatcher
from idgov.api.routes.auth import create_access_token
from idgov.core.errors import NotFoundError
from idgov.db.session import enable_sqlite_foreign_keys
from idgov.main import app
from idgov.models import Base, Domain, Question, Tenant, User, UserRole
from idgov.services.file_storage import StoredFile, generate_storage_key
from idgov.services.notifications import NotificationDispatcher, NotificationKind
from idgov.services.users import hash_password

TEST_PASSWORD = "secret-pass"
_PASSWORD_HASH = hash_password(TEST_PASSWORD)


class InMemoryFileStorage:
    """File storage keeping attachment bytes in a dict."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    def save(self, data: bytes, original_name: str, mime_type: str) -> StoredFile:
        storage_key = generate_storage_key(original_name)
        self.files[storage_key] = bytes(data)
        return StoredFile(storage_key=storage_key, size=len(data))

    def read(self, storage_key: str) -> bytes:
        try:
            return self.files[storage_key]
        except KeyError as exc:
            raise NotFoundError("Stored file not found") from exc

    def delete(self, storage_key: str) -> bool:
        return self.files.pop(storage_key, None) is not None


@dataclass
class SentNotification:
    recipient: str
    kind: NotificationKind
    question_title: str
    tenant_question_id: int
    extra: dict[str, Any] | None


@dataclass
class RecordingNotifier:
    sent: list[SentNotification] = field(default_factory=list)
    fail_for: set[str] = field(default_factory=set)

    def notify(
        self,
        recipient: User,
        kind: NotificationKind,
        question_title: str,
        tenant_question_id: int,
        extra: dict[str, Any] | None = None,
    ) -> None:
        if recipient.email in self.fail_for:
            raise RuntimeError("mail relay unavailable")
        self.sent.append(SentNotification(recipient.email, kind, question_title, tenant_question_id, extra))


class InMemoryS3Client:
    """Simple in-memory S3 stub for the object storage backend."""

    exceptions = SimpleNamespace(NoSuchKey=type("NoSuchKey", (Exception,), {}))

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, bytes]] = {}

    def head_bucket(self, *, Bucket: str) -> None:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")

    def create_bucket(self, *, Bucket: str, **_: object) -> None:
        self._buckets.setdefault(Bucket, {})

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, BytesIO]:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "NoSuchBucket"}}, "GetObject")
        bucket = self._buckets[Bucket]
        if Key not in bucket:
            raise ClientError({"Error": {"Code": "NoSuchKey"}}, "GetObject")
        return {"Body": BytesIO(bucket[Key])}

    def put_object(self, *, Bucket: str, Key: str, Body: bytes, **_: object) -> dict[str, str]:
        self._buckets.setdefault(Bucket, {})[Key] = Body
        return {"ETag": "in-memory"}

    def delete_object(self, *, Bucket: str, Key: str) -> dict[str, object]:
        self._buckets.get(Bucket, {}).pop(Key, None)
        return {}

    @property
    def buckets(self) -> dict[str, dict[str, bytes]]:
        return self._buckets


engine = create_engine(
    "sqlite+pysqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def _user(username: str, role: UserRole, tenant: Tenant | None) -> User:
    return User(
        username=username,
        hashed_password=_PASSWORD_HASH,
        email=f"{username}@example.com",
        full_name=username.replace("_", " ").title(),
        role=role,
        tenant=tenant,
    )


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture()
def seeded(db_session: Session) -> SimpleNamespace:
    """Two tenants, one domain with two questions and a user per role."""

    acme = Tenant(name="Acme", industry="Manufacturing")
    globex = Tenant(name="Globex", industry="Energy")
    domain = Domain(name="Access Reviews", description="Entitlement certification", icon="security")
    questions = [
        Question(title="How often are access reviews run?", domain=domain, tags=["cadence"]),
        Question(title="Who certifies privileged accounts?", domain=domain, required=True),
    ]
    users = {
        "admin": _user("admin_user", UserRole.ADMIN, None),
        "consultant": _user("consultant_user", UserRole.CONSULTANT, None),
        "acme_customer": _user("acme_customer", UserRole.CUSTOMER, acme),
        "acme_colleague": _user("acme_colleague", UserRole.CUSTOMER, acme),
        "globex_customer": _user("globex_customer", UserRole.CUSTOMER, globex),
    }
    db_session.add_all([acme, globex, domain, *questions, *users.values()])
    db_session.commit()
    return SimpleNamespace(acme=acme, globex=globex, domain=domain, questions=questions, **users)


@pytest.fixture()
def file_storage() -> InMemoryFileStorage:
    return InMemoryFileStorage()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def s3_client() -> InMemoryS3Client:
    return InMemoryS3Client()


@pytest.fixture()
def client(
    db_session: Session, file_storage: InMemoryFileStorage, notifier: RecordingNotifier
) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: file_storage
    app.dependency_overrides[get_notification_dispatcher] = lambda: NotificationDispatcher(notifier)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(seeded: SimpleNamespace) -> Callable[[str], dict[str, str]]:
    """Return bearer headers for one of the seeded users, e.g. ``auth_headers("admin")``."""

    def _headers(name: str) -> dict[str, str]:
        token = create_access_token(getattr(seeded, name))
        return {"Authorization": f"Bearer {token}"}

    return _headers
