"""Response threads and their file attachments."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from idgov.core.config import Settings, get_settings
from idgov.core.errors import NotFoundError, UnsupportedMediaTypeError, UpstreamFailureError, ValidationError
from idgov.models import Attachment, Question, Response, TenantQuestion
from idgov.obs import ATTACHMENTS_STORED_COUNTER, RESPONSES_POSTED_COUNTER
from idgov.services.access import Principal, ThreadAction, ensure_allowed
from idgov.services.assignments import get_tenant_question
from idgov.services.file_storage import FileStorage

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AttachmentDownload:
    """Attachment metadata together with its raw bytes."""

    attachment: Attachment
    content: bytes


def _validated_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise ValidationError("Response content must not be empty")
    return content


def _get_response(session: Session, response_id: int) -> Response:
    response = session.get(Response, response_id)
    if response is None:
        raise NotFoundError("Response not found")
    return response


def _load_response(session: Session, response_id: int) -> Response:
    statement = (
        select(Response)
        .options(selectinload(Response.user), selectinload(Response.attachments))
        .where(Response.id == response_id)
        .execution_options(populate_existing=True)
    )
    response = session.scalar(statement)
    if response is None:
        raise NotFoundError("Response not found")
    return response


def post_response(
    session: Session,
    *,
    tenant_question_id: int,
    principal: Principal,
    content: str | None,
) -> Response:
    """Append a message to a thread and return it with its author loaded."""

    tenant_question = get_tenant_question(session, tenant_question_id)
    ensure_allowed(
        principal,
        ThreadAction.WRITE,
        tenant_id=tenant_question.tenant_id,
        message="You don't have permission to add responses to this question",
    )
    body = _validated_content(content)

    response = Response(
        tenant_question_id=tenant_question.id,
        user_id=principal.id,
        content=body,
        created_at=datetime.now(timezone.utc),
    )
    session.add(response)
    session.commit()
    RESPONSES_POSTED_COUNTER.inc()
    logger.info(
        "posted response",
        extra={"tenant_question_id": tenant_question.id, "response_id": response.id, "actor_id": principal.id},
    )
    return _load_response(session, response.id)


def list_responses(
    session: Session, *, tenant_question_id: int, principal: Principal
) -> list[Response]:
    """Return the thread in creation order with authors and attachments loaded."""

    tenant_question = get_tenant_question(session, tenant_question_id)
    ensure_allowed(principal, ThreadAction.READ, tenant_id=tenant_question.tenant_id)

    statement = (
        select(Response)
        .options(selectinload(Response.user), selectinload(Response.attachments))
        .where(Response.tenant_question_id == tenant_question.id)
        .order_by(Response.created_at, Response.id)
    )
    return list(session.scalars(statement).all())


def update_response(
    session: Session, *, response_id: int, principal: Principal, content: str | None
) -> Response:
    response = _get_response(session, response_id)
    ensure_allowed(
        principal,
        ThreadAction.MANAGE_RESPONSE,
        owner_id=response.user_id,
        message="You don't have permission to edit this response",
    )
    response.content = _validated_content(content)
    session.commit()
    return _load_response(session, response.id)


def delete_response(
    session: Session, *, response_id: int, principal: Principal, storage: FileStorage
) -> None:
    response = _get_response(session, response_id)
    ensure_allowed(
        principal,
        ThreadAction.MANAGE_RESPONSE,
        owner_id=response.user_id,
        message="You don't have permission to delete this response",
    )
    storage_keys = collect_storage_keys(session, response_id=response.id)
    session.delete(response)
    session.commit()
    remove_stored_files(storage, storage_keys)


def attach_file(
    session: Session,
    *,
    response_id: int,
    principal: Principal,
    data: bytes,
    original_name: str,
    mime_type: str,
    storage: FileStorage,
    settings: Settings | None = None,
) -> Attachment:
    """Store ``data`` through the file storage collaborator and record it on the response."""

    settings = settings or get_settings()
    response = _get_response(session, response_id)
    ensure_allowed(
        principal,
        ThreadAction.MANAGE_RESPONSE,
        owner_id=response.user_id,
        message="You don't have permission to add attachments to this response",
    )
    if not data:
        raise ValidationError("No file uploaded")
    mime_type = mime_type.split(";")[0].strip().lower()
    if mime_type not in settings.allowed_mime_types:
        raise UnsupportedMediaTypeError(f"Unsupported file type: {mime_type}")
    if len(data) > settings.max_upload_bytes:
        raise UnsupportedMediaTypeError(
            f"File exceeds the maximum size of {settings.max_upload_bytes} bytes"
        )

    stored = storage.save(data, original_name, mime_type)
    attachment = Attachment(
        response_id=response.id,
        filename=stored.storage_key,
        original_name=original_name,
        mime_type=mime_type,
        size=stored.size,
        created_at=datetime.now(timezone.utc),
    )
    session.add(attachment)
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        storage.delete(stored.storage_key)
        raise UpstreamFailureError("Failed to record attachment") from exc

    session.refresh(attachment)
    ATTACHMENTS_STORED_COUNTER.labels(mime_type=mime_type).inc()
    logger.info(
        "stored attachment",
        extra={"response_id": response.id, "attachment_id": attachment.id, "size_bytes": stored.size},
    )
    return attachment


def _resolve_attachment_tenant(session: Session, attachment_id: int) -> tuple[Attachment, Response, TenantQuestion]:
    attachment = session.get(Attachment, attachment_id)
    if attachment is None:
        raise NotFoundError("Attachment not found")
    response = session.get(Response, attachment.response_id)
    if response is None:
        raise NotFoundError("Response not found")
    tenant_question = session.get(TenantQuestion, response.tenant_question_id)
    if tenant_question is None:
        raise NotFoundError("Tenant question not found")
    return attachment, response, tenant_question


def download_attachment(
    session: Session, *, attachment_id: int, principal: Principal, storage: FileStorage
) -> AttachmentDownload:
    attachment, _, tenant_question = _resolve_attachment_tenant(session, attachment_id)
    ensure_allowed(
        principal,
        ThreadAction.READ,
        tenant_id=tenant_question.tenant_id,
        message="You don't have permission to access this file",
    )
    return AttachmentDownload(attachment=attachment, content=storage.read(attachment.filename))


def delete_attachment(
    session: Session, *, attachment_id: int, principal: Principal, storage: FileStorage
) -> None:
    attachment, response, _ = _resolve_attachment_tenant(session, attachment_id)
    ensure_allowed(
        principal,
        ThreadAction.MANAGE_RESPONSE,
        owner_id=response.user_id,
        message="You don't have permission to delete this attachment",
    )
    storage_key = attachment.filename
    session.delete(attachment)
    session.commit()
    remove_stored_files(storage, [storage_key])


def collect_storage_keys(
    session: Session,
    *,
    tenant_id: int | None = None,
    domain_id: int | None = None,
    question_id: int | None = None,
    tenant_question_id: int | None = None,
    response_id: int | None = None,
) -> list[str]:
    """Storage keys of attachments that a cascading delete is about to drop."""

    statement = (
        select(Attachment.filename)
        .join(Response, Attachment.response_id == Response.id)
        .join(TenantQuestion, Response.tenant_question_id == TenantQuestion.id)
    )
    if tenant_id is not None:
        statement = statement.where(TenantQuestion.tenant_id == tenant_id)
    if domain_id is not None:
        statement = statement.join(Question, TenantQuestion.question_id == Question.id).where(
            Question.domain_id == domain_id
        )
    if question_id is not None:
        statement = statement.where(TenantQuestion.question_id == question_id)
    if tenant_question_id is not None:
        statement = statement.where(TenantQuestion.id == tenant_question_id)
    if response_id is not None:
        statement = statement.where(Response.id == response_id)
    return list(session.scalars(statement).all())


def remove_stored_files(storage: FileStorage, storage_keys: Iterable[str]) -> None:
    for storage_key in storage_keys:
        if not storage.delete(storage_key):
            logger.warning("failed to remove stored attachment", extra={"storage_key": storage_key})


__all__ = [
    "AttachmentDownload",
    "attach_file",
    "collect_storage_keys",
    "delete_attachment",
    "delete_response",
    "download_attachment",
    "list_responses",
    "post_response",
    "remove_stored_files",
    "update_response",
]
