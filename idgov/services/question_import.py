"""Bulk import of questions from spreadsheet-mapped rows."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from idgov.models import Domain, Question

logger = logging.getLogger(__name__)

_QUESTION_IMPORT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "QuestionImportRow",
    "type": "object",
    "properties": {
        "title": {"type": "string", "minLength": 1, "maxLength": 255, "pattern": "\\S"},
        "description": {"type": ["string", "null"]},
        "domain_id": {"type": "integer", "minimum": 1},
        "required": {"type": ["boolean", "null"]},
        "tags": {
            "oneOf": [
                {"type": "array", "items": {"type": "string"}},
                {"type": "string"},
                {"type": "null"},
            ]
        },
    },
    "required": ["title", "domain_id"],
    "additionalProperties": True,
}


@dataclass(slots=True)
class ImportRowResult:
    success: bool
    question: Question | None = None
    error: str | None = None
    data: dict[str, Any] | None = None


@dataclass(slots=True)
class ImportSummary:
    results: list[ImportRowResult]

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def error_count(self) -> int:
        return len(self.results) - self.success_count

    @property
    def message(self) -> str:
        return f"Imported {self.success_count} questions successfully, {self.error_count} failed."


class QuestionImporter:
    """Validates rows against the import schema and creates the valid ones."""

    def __init__(self) -> None:
        self._validator = Draft202012Validator(_QUESTION_IMPORT_SCHEMA)

    def _normalize_row(self, row: Any) -> Any:
        if not isinstance(row, dict):
            return row
        normalized: dict[str, Any] = dict(row)
        # spreadsheet columns arrive with the client's camelCase names
        if "domainId" in normalized and "domain_id" not in normalized:
            normalized["domain_id"] = normalized.pop("domainId")
        domain_id = normalized.get("domain_id")
        if isinstance(domain_id, str) and domain_id.strip().isdigit():
            normalized["domain_id"] = int(domain_id.strip())
        if isinstance(normalized.get("title"), str):
            normalized["title"] = normalized["title"].strip()
        return normalized

    def validate_row(self, row: Any) -> list[str]:
        errors = sorted(self._validator.iter_errors(row), key=lambda e: list(e.path))
        return [self._format_error(error) for error in errors]

    def _format_error(self, error: SchemaValidationError) -> str:
        path = "->".join(str(part) for part in error.path)
        return f"{path or '<root>'}: {error.message}"

    @staticmethod
    def _parse_tags(value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return [tag.strip() for tag in value if tag.strip()]

    def import_rows(self, session: Session, rows: list[Any]) -> ImportSummary:
        domain_ids = set(session.scalars(select(Domain.id)))
        results: list[ImportRowResult] = []

        for raw_row in rows:
            row = self._normalize_row(raw_row)
            errors = self.validate_row(row)
            if not errors and row["domain_id"] not in domain_ids:
                errors = [f"domain_id: Domain '{row['domain_id']}' does not exist"]
            if errors:
                results.append(
                    ImportRowResult(
                        success=False,
                        error="; ".join(errors),
                        data=raw_row if isinstance(raw_row, dict) else {"value": raw_row},
                    )
                )
                continue

            question = Question(
                title=row["title"],
                description=row.get("description") or None,
                domain_id=int(row["domain_id"]),
                required=bool(row.get("required") or False),
                tags=self._parse_tags(row.get("tags")),
            )
            session.add(question)
            results.append(ImportRowResult(success=True, question=question))

        session.commit()
        for result in results:
            if result.question is not None:
                session.refresh(result.question)

        summary = ImportSummary(results=results)
        if summary.error_count:
            logger.warning(
                "question import produced invalid rows",
                extra={"invalid_count": summary.error_count, "valid_count": summary.success_count},
            )
        logger.info("imported questions", extra={"valid_count": summary.success_count})
        return summary


__all__ = ["ImportRowResult", "ImportSummary", "QuestionImporter"]
