"""User administration endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session
from idgov.api.routes.auth import require_role
from idgov.models import UserRole
from idgov.schemas import UserCreate, UserRead, UserUpdate
from idgov.services.access import Principal
from idgov.services.users import create_user, delete_user, get_user, list_users, update_user

router = APIRouter(prefix="/admin/users")
require_admin = require_role(UserRole.ADMIN)


@router.get("", response_model=list[UserRead])
def read_users(
    tenant_id: int | None = None,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> list[UserRead]:
    return [UserRead.model_validate(user) for user in list_users(session, tenant_id=tenant_id)]


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def add_user(
    payload: UserCreate,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> UserRead:
    user = create_user(
        session,
        username=payload.username,
        password=payload.password,
        email=payload.email,
        full_name=payload.full_name,
        role=payload.role,
        tenant_id=payload.tenant_id,
    )
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
def read_user(
    user_id: int,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> UserRead:
    return UserRead.model_validate(get_user(session, user_id))


@router.put("/{user_id}", response_model=UserRead)
def edit_user(
    user_id: int,
    payload: UserUpdate,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> UserRead:
    # tenant_id may be cleared explicitly; every other column is non-nullable
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key == "tenant_id"
    }
    return UserRead.model_validate(update_user(session, user_id=user_id, changes=changes))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(
    user_id: int,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> Response:
    delete_user(session, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["add_user", "edit_user", "read_user", "read_users", "remove_user", "router"]
