from __future__ import annotations

import json
import logging

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from pydantic import BaseModel

from idgov.obs import RESPONSES_POSTED_COUNTER, AuditMiddleware, PrometheusMiddleware, metrics_router


class _Credentials(BaseModel):
    username: str
    password: str


def _audited_app(logger: logging.Logger) -> FastAPI:
    app = FastAPI()
    app.add_middleware(AuditMiddleware, logger=logger)

    @app.post("/login")
    def login(payload: _Credentials) -> dict[str, str]:
        return {"username": payload.username}

    @app.post("/upload")
    async def upload(request: Request) -> dict[str, int]:
        return {"size": len(await request.body())}

    return app


def test_metrics_endpoint_exposes_counters() -> None:
    app = FastAPI()
    app.add_middleware(PrometheusMiddleware)
    app.include_router(metrics_router)

    client = TestClient(app)
    RESPONSES_POSTED_COUNTER.inc(0)
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert "thread_responses_posted_total" in response.text


def test_audit_log_masks_credentials(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.audit")
    client = TestClient(_audited_app(logger))

    with caplog.at_level(logging.INFO, logger="tests.audit"):
        response = client.post(
            "/login",
            json={"username": "acme_customer", "password": "hunter2"},
            headers={"X-Request-ID": "req-123"},
        )

    assert response.status_code == 200
    assert response.json() == {"username": "acme_customer"}
    assert response.headers["X-Request-ID"] == "req-123"
    record = json.loads(caplog.records[-1].getMessage())
    assert record["body"] == {"username": "acme_customer", "password": "***"}
    assert record["path"] == "/login"
    assert record["status"] == 200


def test_audit_log_does_not_buffer_binary_bodies(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.audit")
    client = TestClient(_audited_app(logger))

    with caplog.at_level(logging.INFO, logger="tests.audit"):
        response = client.post(
            "/upload", content=b"\x89PNG" * 10, headers={"Content-Type": "application/octet-stream"}
        )

    assert response.json() == {"size": 40}
    record = json.loads(caplog.records[-1].getMessage())
    assert record["body"] == "<binary>"
