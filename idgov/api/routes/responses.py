"""Response thread endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session, get_file_storage, get_notification_dispatcher
from idgov.api.routes.auth import get_current_user
from idgov.schemas import ResponseCreate, ResponseRead, ResponseUpdate
from idgov.services.access import Principal
from idgov.services.file_storage import FileStorage
from idgov.services.notifications import NotificationDispatcher, NotificationKind
from idgov.services.threads import delete_response, list_responses, post_response, update_response

router = APIRouter()


@router.get("/tenant-questions/{tenant_question_id}/responses", response_model=list[ResponseRead])
def read_responses(
    tenant_question_id: int,
    session: Session = Depends(get_db_session),
    user: Principal = Depends(get_current_user),
) -> list[ResponseRead]:
    responses = list_responses(session, tenant_question_id=tenant_question_id, principal=user)
    return [ResponseRead.model_validate(item) for item in responses]


@router.post(
    "/tenant-questions/{tenant_question_id}/responses",
    response_model=ResponseRead,
    status_code=status.HTTP_201_CREATED,
)
def add_response(
    tenant_question_id: int,
    payload: ResponseCreate,
    session: Session = Depends(get_db_session),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    user: Principal = Depends(get_current_user),
) -> ResponseRead:
    """Post a message to the thread and notify the other users of the tenant."""

    response = post_response(
        session, tenant_question_id=tenant_question_id, principal=user, content=payload.content
    )
    result = ResponseRead.model_validate(response)
    tenant_question = response.tenant_question
    dispatcher.notify_tenant(
        session,
        tenant_id=tenant_question.tenant_id,
        kind=NotificationKind.RESPONSE_ADDED,
        actor_id=user.id,
        question_title=tenant_question.question.title,
        tenant_question_id=tenant_question.id,
    )
    return result


@router.put("/responses/{response_id}", response_model=ResponseRead)
def edit_response(
    response_id: int,
    payload: ResponseUpdate,
    session: Session = Depends(get_db_session),
    user: Principal = Depends(get_current_user),
) -> ResponseRead:
    response = update_response(session, response_id=response_id, principal=user, content=payload.content)
    return ResponseRead.model_validate(response)


@router.delete("/responses/{response_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_response(
    response_id: int,
    session: Session = Depends(get_db_session),
    storage: FileStorage = Depends(get_file_storage),
    user: Principal = Depends(get_current_user),
) -> Response:
    delete_response(session, response_id=response_id, principal=user, storage=storage)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["add_response", "edit_response", "read_responses", "remove_response", "router"]
