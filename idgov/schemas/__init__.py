"""Pydantic schemas package."""

from .dashboard import ActivityRead, DashboardRead, DomainProgressRead, TenantProgressRead
from .domain import DomainCreate, DomainRead, DomainUpdate
from .question import (
    BulkImportRequest,
    BulkImportResponse,
    BulkImportRowResult,
    QuestionCreate,
    QuestionRead,
    QuestionUpdate,
    QuestionWithDomain,
)
from .response import AttachmentRead, ResponseCreate, ResponseRead, ResponseUpdate
from .tenant import TenantCreate, TenantRead, TenantUpdate
from .tenant_question import (
    AssignmentRequest,
    BulkAssignmentRequest,
    BulkAssignmentResponse,
    StatusUpdateRequest,
    TenantQuestionDetail,
    TenantQuestionRead,
)
from .user import RegisterRequest, UserCreate, UserRead, UserSummary, UserUpdate

__all__ = [
    "ActivityRead",
    "AssignmentRequest",
    "AttachmentRead",
    "BulkAssignmentRequest",
    "BulkAssignmentResponse",
    "BulkImportRequest",
    "BulkImportResponse",
    "BulkImportRowResult",
    "DashboardRead",
    "DomainCreate",
    "DomainProgressRead",
    "DomainRead",
    "DomainUpdate",
    "QuestionCreate",
    "QuestionRead",
    "QuestionUpdate",
    "QuestionWithDomain",
    "RegisterRequest",
    "ResponseCreate",
    "ResponseRead",
    "ResponseUpdate",
    "StatusUpdateRequest",
    "TenantCreate",
    "TenantProgressRead",
    "TenantQuestionDetail",
    "TenantQuestionRead",
    "TenantRead",
    "TenantUpdate",
    "UserCreate",
    "UserRead",
    "UserSummary",
    "UserUpdate",
]
