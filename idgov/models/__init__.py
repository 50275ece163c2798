"""ORM models package."""
from .attachment import Attachment
from .base import Base, CreatedAtMixin, TimestampMixin
from .domain import DEFAULT_DOMAIN_ICON, Domain
from .question import Question
from .response import Response
from .tenant import Tenant
from .tenant_question import TenantQuestion, TenantQuestionStatus
from .user import User, UserRole

__all__ = [
    "Attachment",
    "Base",
    "CreatedAtMixin",
    "DEFAULT_DOMAIN_ICON",
    "Domain",
    "Question",
    "Response",
    "Tenant",
    "TenantQuestion",
    "TenantQuestionStatus",
    "TimestampMixin",
    "User",
    "UserRole",
]
