"""Top level API router registration."""
from fastapi import APIRouter, FastAPI

from idgov.api.routes import (
    attachments,
    auth,
    dashboard,
    domains,
    health,
    questions,
    responses,
    tenant_questions,
    tenants,
    users,
)


def register_routes(application: FastAPI) -> None:
    """Register all API routers with the FastAPI application."""
    api_router = APIRouter(prefix="/api")

    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(auth.router, tags=["auth"])
    api_router.include_router(tenants.router, tags=["tenants"])
    api_router.include_router(users.router, tags=["users"])
    api_router.include_router(domains.router, tags=["domains"])
    api_router.include_router(questions.router, tags=["questions"])
    api_router.include_router(tenant_questions.router, tags=["tenant-questions"])
    api_router.include_router(responses.router, tags=["responses"])
    api_router.include_router(attachments.router, tags=["attachments"])
    api_router.include_router(dashboard.router, tags=["dashboard"])

    application.include_router(api_router)


__all__ = ["register_routes"]
