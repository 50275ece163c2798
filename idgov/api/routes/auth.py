"""Authentication endpoints issuing JWTs and the caller dependencies built on them."""
from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Literal
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session
from idgov.core.config import Settings, get_settings
from idgov.models import User, UserRole
from idgov.schemas import RegisterRequest, UserRead
from idgov.services.access import Principal
from idgov.services.assignments import assign_default_questions
from idgov.services.users import create_user, get_user_by_username, verify_password

router = APIRouter()
security_scheme = HTTPBearer(auto_error=True)
optional_security_scheme = HTTPBearer(auto_error=False)


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead


class TokenPayload(BaseModel):
    sub: str
    tid: int | None
    role: UserRole
    type: Literal["access"]
    iat: datetime
    exp: datetime
    jti: str


def create_access_token(user: User, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    now = datetime.now(UTC)
    payload = {
        "sub": str(user.id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.access_token_expire_minutes)).timestamp()),
        "tid": user.tenant_id,
        "role": user.role.value,
        "type": "access",
        "jti": uuid4().hex,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _decode_token(*, token: str, settings: Settings) -> TokenPayload:
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc
    try:
        return TokenPayload(**payload)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


def _principal_from_token(request: Request, session: Session, token: str) -> Principal:
    payload = _decode_token(token=token, settings=get_settings())
    # role and tenant come from the user row, not the token claims
    user = session.get(User, int(payload.sub)) if payload.sub.isdigit() else None
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")

    request.state.actor_id = user.id
    request.state.tenant_id = user.tenant_id
    return Principal(id=user.id, username=user.username, role=user.role, tenant_id=user.tenant_id)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security_scheme),
    session: Session = Depends(get_db_session),
) -> Principal:
    return _principal_from_token(request, session, credentials.credentials)


def get_optional_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_security_scheme),
    session: Session = Depends(get_db_session),
) -> Principal | None:
    if credentials is None:
        return None
    return _principal_from_token(request, session, credentials.credentials)


def require_role(*roles: UserRole) -> Callable[..., Principal]:
    allowed_roles = set(roles)

    def dependency(user: Principal = Depends(get_current_user)) -> Principal:
        if user.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return dependency


@router.post("/auth/login", response_model=TokenResponse, summary="Issue a JWT access token")
def login(payload: LoginRequest, session: Session = Depends(get_db_session)) -> TokenResponse:
    settings = get_settings()
    user = get_user_by_username(session, payload.username)
    if user is None or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenResponse(
        access_token=create_access_token(user, settings),
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserRead.model_validate(user),
    )


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_db_session),
    caller: Principal | None = Depends(get_optional_user),
) -> UserRead:
    """Create an account; non-customer roles can only be granted by an admin."""

    if payload.role is not UserRole.CUSTOMER and (caller is None or not caller.is_admin):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can create non-customer accounts",
        )

    user = create_user(
        session,
        username=payload.username,
        password=payload.password,
        email=payload.email,
        full_name=payload.full_name,
        role=payload.role,
        tenant_id=payload.tenant_id,
    )
    if user.tenant_id is not None:
        assign_default_questions(session, tenant_id=user.tenant_id)
    return UserRead.model_validate(user)


@router.get("/auth/me", response_model=UserRead, summary="Return the authenticated user")
def me(
    user: Principal = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> UserRead:
    return UserRead.model_validate(session.get(User, user.id))


__all__ = [
    "LoginRequest",
    "TokenPayload",
    "TokenResponse",
    "create_access_token",
    "get_current_user",
    "get_optional_user",
    "login",
    "me",
    "register",
    "require_role",
    "router",
]
