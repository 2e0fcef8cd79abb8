"""Unit tests for the FastAPI error handlers."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from service_errors.api.handlers import register_error_handlers
from service_errors.core.codes import ServiceError
from service_errors.core.errors import ApplicationError

GENERIC_DESCRIPTION = "Internal system error occurred, administrator was notified"


class _LoggerStub:
    def __init__(self) -> None:
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self.calls.append(((msg, *args), kwargs))


def _build_client(logger: _LoggerStub | None = None) -> TestClient:
    app = FastAPI()
    register_error_handlers(app, logger=logger)

    @app.get("/query")
    def query(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.get("/not-found")
    def not_found() -> None:
        raise ApplicationError(ServiceError.NOT_FOUND, "Pipeline not found", "t-404")

    @app.get("/http")
    def http_error() -> None:
        raise StarletteHTTPException(status_code=409, detail="Client already exists")

    @app.get("/billing")
    def billing() -> None:
        raise StarletteHTTPException(status_code=402, detail="Plan upgrade needed", headers={"Retry-After": "60"})

    @app.get("/teapot")
    def teapot() -> None:
        raise StarletteHTTPException(status_code=418)

    @app.get("/crash")
    def crash() -> None:
        raise RuntimeError("disk full")

    # Starlette re-raises unhandled exceptions after the handler responds.
    return TestClient(app, raise_server_exceptions=False)


def test_application_errors_use_flat_envelope() -> None:
    client = _build_client()

    response = client.get("/not-found")

    assert response.status_code == 404
    assert response.json() == {
        "error": "not_found",
        "error_description": "Pipeline not found",
        "trace": "t-404",
    }
    assert response.headers["X-Trace-Id"] == "t-404"


def test_request_validation_errors_are_classified() -> None:
    client = _build_client()

    response = client.get("/query", headers={"X-Trace-Id": "req-1"})

    assert response.status_code == 400
    assert response.json() == {
        "error": "validation_error",
        "error_description": "Request validation failed",
        "trace": "req-1",
    }


def test_http_errors_are_classified_by_status_code() -> None:
    client = _build_client()

    response = client.get("/http")

    assert response.status_code == 409
    assert response.json() == {
        "error": "conflict",
        "error_description": "Client already exists",
        "trace": "sys_int_helper",
    }


def test_unmapped_http_status_is_kept() -> None:
    client = _build_client()

    response = client.get("/teapot")

    assert response.status_code == 418
    assert response.json()["error"] == "bad_request"


def test_unknown_route_is_not_found() -> None:
    client = _build_client()

    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_unhandled_exceptions_are_logged_and_hidden() -> None:
    logger = _LoggerStub()
    client = _build_client(logger)

    response = client.get("/crash", headers={"X-Trace-Id": "req-500"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "system_error",
        "error_description": GENERIC_DESCRIPTION,
        "trace": "req-500",
    }
    assert len(logger.calls) == 1
    assert isinstance(logger.calls[0][0][2], RuntimeError)


def test_trace_header_name_is_configurable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERVICE_ERRORS_TRACE_HEADER", "X-Request-ID")
    client = _build_client(_LoggerStub())

    response = client.get("/crash", headers={"X-Request-ID": "rid-1"})

    assert response.json()["trace"] == "rid-1"
    assert response.headers["X-Request-ID"] == "rid-1"


def test_payment_required_keeps_status_and_headers() -> None:
    client = _build_client()

    response = client.get("/billing", headers={"X-Trace-Id": "req-402"})

    assert response.status_code == 402
    assert response.json() == {
        "error": "payment_required",
        "error_description": "Plan upgrade needed",
        "trace": "req-402",
    }
    assert response.headers["Retry-After"] == "60"
    assert response.headers["X-Trace-Id"] == "req-402"


def test_method_not_allowed_keeps_allow_header() -> None:
    client = _build_client()

    response = client.post("/not-found")

    assert response.status_code == 405
    assert response.json()["error"] == "unsupported_method"
    assert "GET" in response.headers["Allow"]


def test_trace_set_by_middleware_wins_over_header() -> None:
    app = FastAPI()
    register_error_handlers(app, logger=_LoggerStub())

    @app.middleware("http")
    async def _trace_middleware(request, call_next):
        request.state.trace = "mw-trace"
        return await call_next(request)

    @app.get("/crash")
    def crash() -> None:
        raise RuntimeError("disk full")

    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/crash", headers={"X-Trace-Id": "client-trace"})

    assert response.status_code == 500
    assert response.json()["trace"] == "mw-trace"
    assert response.headers["X-Trace-Id"] == "mw-trace"
