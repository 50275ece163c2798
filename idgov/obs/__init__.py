"""Observability utilities."""

from .audit import AuditLogRecord, AuditMiddleware
from .metrics import (
    ATTACHMENTS_STORED_COUNTER,
    NOTIFICATION_COUNTER,
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    RESPONSES_POSTED_COUNTER,
    PrometheusMiddleware,
    metrics_router,
)
from .tracing import initialise_tracing, instrument_fastapi_app, instrument_sqlalchemy_engine

__all__ = [
    "ATTACHMENTS_STORED_COUNTER",
    "AuditLogRecord",
    "AuditMiddleware",
    "NOTIFICATION_COUNTER",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "RESPONSES_POSTED_COUNTER",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "metrics_router",
]
