"""Attachment upload and download endpoints."""
from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session, get_file_storage, get_notification_dispatcher
from idgov.api.routes.auth import get_current_user
from idgov.core.errors import ValidationError
from idgov.schemas import AttachmentRead
from idgov.services.access import Principal
from idgov.services.file_storage import FileStorage
from idgov.services.notifications import NotificationDispatcher, NotificationKind
from idgov.services.threads import attach_file, delete_attachment, download_attachment

router = APIRouter()


@router.post(
    "/responses/{response_id}/attachments",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
)
def upload_attachment(
    response_id: int,
    file: UploadFile | None = File(default=None),
    session: Session = Depends(get_db_session),
    storage: FileStorage = Depends(get_file_storage),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    user: Principal = Depends(get_current_user),
) -> AttachmentRead:
    if file is None:
        raise ValidationError("No file uploaded")

    attachment = attach_file(
        session,
        response_id=response_id,
        principal=user,
        data=file.file.read(),
        original_name=file.filename or "upload",
        mime_type=file.content_type or "application/octet-stream",
        storage=storage,
    )
    result = AttachmentRead.model_validate(attachment)
    tenant_question = attachment.response.tenant_question
    dispatcher.notify_tenant(
        session,
        tenant_id=tenant_question.tenant_id,
        kind=NotificationKind.FILE_UPLOADED,
        actor_id=user.id,
        question_title=tenant_question.question.title,
        tenant_question_id=tenant_question.id,
        extra={"file_name": attachment.original_name},
    )
    return result


@router.get("/attachments/{attachment_id}", response_class=Response)
def read_attachment(
    attachment_id: int,
    session: Session = Depends(get_db_session),
    storage: FileStorage = Depends(get_file_storage),
    user: Principal = Depends(get_current_user),
) -> Response:
    """Return the stored bytes as a download named after the original upload."""

    download = download_attachment(session, attachment_id=attachment_id, principal=user, storage=storage)
    attachment = download.attachment
    return Response(
        content=download.content,
        media_type=attachment.mime_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(attachment.original_name)}",
        },
    )


@router.delete("/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_attachment(
    attachment_id: int,
    session: Session = Depends(get_db_session),
    storage: FileStorage = Depends(get_file_storage),
    user: Principal = Depends(get_current_user),
) -> Response:
    delete_attachment(session, attachment_id=attachment_id, principal=user, storage=storage)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["read_attachment", "remove_attachment", "router", "upload_attachment"]
