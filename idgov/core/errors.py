"""Domain error taxonomy shared by services and the HTTP layer."""
from __future__ import annotations


class QuestionnaireError(RuntimeError):
    """Base exception for questionnaire service errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(QuestionnaireError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    code = "not_found"


class ForbiddenError(QuestionnaireError):
    """Raised when the principal is authenticated but not authorized."""

    status_code = 403
    code = "forbidden"


class ValidationError(QuestionnaireError):
    """Raised when a payload is malformed or misses a required field."""

    status_code = 400
    code = "validation_error"


class DuplicateAssignmentError(QuestionnaireError):
    """Raised when a question is already assigned to the tenant."""

    status_code = 409
    code = "duplicate_assignment"


class DuplicateUsernameError(QuestionnaireError):
    """Raised when registering a username that is already taken."""

    status_code = 409
    code = "duplicate_username"


class UnsupportedMediaTypeError(QuestionnaireError):
    """Raised when an attachment's type or size is rejected."""

    status_code = 415
    code = "unsupported_media_type"


class UpstreamFailureError(QuestionnaireError):
    """Raised when the store or file storage collaborator fails."""

    status_code = 500
    code = "upstream_failure"


__all__ = [
    "DuplicateAssignmentError",
    "DuplicateUsernameError",
    "ForbiddenError",
    "NotFoundError",
    "QuestionnaireError",
    "UnsupportedMediaTypeError",
    "UpstreamFailureError",
    "ValidationError",
]
