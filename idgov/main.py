"""FastAPI application entrypoint."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from idgov.api.routes import register_routes
from idgov.core.config import Settings, get_settings
from idgov.core.errors import QuestionnaireError, ValidationError
from idgov.core.logging import configure_logging
from idgov.obs import (
    AuditMiddleware,
    PrometheusMiddleware,
    initialise_tracing,
    instrument_fastapi_app,
    metrics_router,
)

logger = logging.getLogger(__name__)


async def questionnaire_error_handler(request: Request, exc: QuestionnaireError) -> JSONResponse:
    """Render service errors as ``{"detail", "code"}`` with the mapped status."""

    if exc.status_code >= 500:
        logger.error(
            "request failed",
            extra={"path": request.url.path, "code": exc.code, "error": exc.message},
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request payloads the same way services report ``ValidationError``."""

    messages: list[str] = []
    for error in exc.errors():
        location = "->".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location or '<root>'}: {error.get('msg', 'invalid value')}")
    return await questionnaire_error_handler(request, ValidationError("; ".join(messages) or "Invalid request"))


def create_application(settings: Settings | None = None) -> FastAPI:
    """Application factory used by ASGI servers and tests."""
    configure_logging()
    settings = settings or get_settings()

    if settings.enable_tracing:
        initialise_tracing(service_name=settings.app_name, endpoint=settings.otel_exporter_endpoint)

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
    )

    application.add_middleware(AuditMiddleware)
    if settings.enable_metrics:
        application.add_middleware(PrometheusMiddleware)
        application.include_router(metrics_router)
    application.add_exception_handler(QuestionnaireError, questionnaire_error_handler)  # type: ignore[arg-type]
    application.add_exception_handler(RequestValidationError, request_validation_error_handler)  # type: ignore[arg-type]
    register_routes(application)

    if settings.enable_tracing:
        instrument_fastapi_app(application)

    return application


app = create_application()
