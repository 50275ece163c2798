"""Question pool endpoints including spreadsheet bulk import."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from idgov.api.deps import get_db_session, get_file_storage
from idgov.api.routes.auth import get_current_user, require_role
from idgov.models import UserRole
from idgov.schemas import (
    BulkImportRequest,
    BulkImportResponse,
    BulkImportRowResult,
    QuestionCreate,
    QuestionRead,
    QuestionUpdate,
    QuestionWithDomain,
)
from idgov.services.access import Principal
from idgov.services.catalog import create_question, delete_question, get_question, list_questions, update_question
from idgov.services.file_storage import FileStorage
from idgov.services.question_import import QuestionImporter

router = APIRouter()
require_admin = require_role(UserRole.ADMIN)


@router.get("/questions", response_model=list[QuestionWithDomain])
def read_questions(
    domain_id: int | None = None,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(get_current_user),
) -> list[QuestionWithDomain]:
    return [QuestionWithDomain.model_validate(item) for item in list_questions(session, domain_id=domain_id)]


@router.get("/questions/{question_id}", response_model=QuestionWithDomain)
def read_question(
    question_id: int,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(get_current_user),
) -> QuestionWithDomain:
    return QuestionWithDomain.model_validate(get_question(session, question_id))


@router.post("/admin/questions", response_model=QuestionWithDomain, status_code=status.HTTP_201_CREATED)
def add_question(
    payload: QuestionCreate,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> QuestionWithDomain:
    question = create_question(
        session,
        title=payload.title,
        domain_id=payload.domain_id,
        description=payload.description,
        required=payload.required,
        tags=payload.tags,
    )
    return QuestionWithDomain.model_validate(question)


@router.post("/admin/questions/bulk", response_model=BulkImportResponse, status_code=status.HTTP_201_CREATED)
def import_questions(
    payload: BulkImportRequest,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> BulkImportResponse:
    """Create questions from spreadsheet rows; invalid rows are reported, not created."""

    summary = QuestionImporter().import_rows(session, payload.questions)
    return BulkImportResponse(
        message=summary.message,
        total_processed=len(summary.results),
        success_count=summary.success_count,
        error_count=summary.error_count,
        results=[
            BulkImportRowResult(
                success=result.success,
                question=QuestionRead.model_validate(result.question) if result.question is not None else None,
                error=result.error,
                data=result.data,
            )
            for result in summary.results
        ],
    )


@router.put("/admin/questions/{question_id}", response_model=QuestionWithDomain)
def edit_question(
    question_id: int,
    payload: QuestionUpdate,
    session: Session = Depends(get_db_session),
    _: Principal = Depends(require_admin),
) -> QuestionWithDomain:
    question = update_question(session, question_id=question_id, changes=payload.model_dump(exclude_unset=True, exclude_none=True))
    return QuestionWithDomain.model_validate(question)


@router.delete("/admin/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_question(
    question_id: int,
    session: Session = Depends(get_db_session),
    storage: FileStorage = Depends(get_file_storage),
    _: Principal = Depends(require_admin),
) -> Response:
    delete_question(session, question_id=question_id, storage=storage)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = [
    "add_question",
    "edit_question",
    "import_questions",
    "read_question",
    "read_questions",
    "remove_question",
    "router",
]
