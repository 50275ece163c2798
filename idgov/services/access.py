"""Capability checks for tenant-scoped resources.

Every route and service that touches tenant data asks :func:`is_allowed`
rather than comparing role strings itself. The rules are:

``READ`` / ``WRITE``
    Admins and consultants may read and post to any tenant's threads;
    customers only to threads of their own tenant.
``SET_STATUS``
    Admins always; customers and consultants only when bound to the tenant
    that owns the assignment.
``MANAGE_RESPONSE``
    Editing or deleting a response, or attaching files to it, is reserved to
    its author and to admins.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass

from idgov.core.errors import ForbiddenError
from idgov.models import UserRole


class ThreadAction(str, enum.Enum):
    READ = "read"
    WRITE = "write"
    SET_STATUS = "set_status"
    MANAGE_RESPONSE = "manage_response"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as supplied by the identity collaborator."""

    id: int
    username: str
    role: UserRole
    tenant_id: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


def is_allowed(
    principal: Principal,
    action: ThreadAction,
    *,
    tenant_id: int | None = None,
    owner_id: int | None = None,
) -> bool:
    """Return whether ``principal`` may perform ``action``."""

    if principal.is_admin:
        return True

    same_tenant = tenant_id is not None and principal.tenant_id == tenant_id
    if action in (ThreadAction.READ, ThreadAction.WRITE):
        return principal.role is UserRole.CONSULTANT or same_tenant
    if action is ThreadAction.SET_STATUS:
        return same_tenant
    if action is ThreadAction.MANAGE_RESPONSE:
        return owner_id is not None and principal.id == owner_id
    return False


def can_access_tenant(principal: Principal, tenant_id: int) -> bool:
    return is_allowed(principal, ThreadAction.READ, tenant_id=tenant_id)


def ensure_allowed(
    principal: Principal,
    action: ThreadAction,
    *,
    tenant_id: int | None = None,
    owner_id: int | None = None,
    message: str = "You don't have permission to access this data",
) -> None:
    if not is_allowed(principal, action, tenant_id=tenant_id, owner_id=owner_id):
        raise ForbiddenError(message)


__all__ = [
    "Principal",
    "ThreadAction",
    "can_access_tenant",
    "ensure_allowed",
    "is_allowed",
]
