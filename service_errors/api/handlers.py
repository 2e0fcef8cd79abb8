"""FastAPI exception handlers that answer with the flat error body."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from service_errors.core.codes import ServiceError
from service_errors.core.config import get_error_settings
from service_errors.core.errors import ApplicationError
from service_errors.core.errors import DEFAULT_TRACE
from service_errors.core.errors import FailureLogger
from service_errors.core.errors import handle_failure
from service_errors.core.errors import send


class JSONResponseWriter:
    """Collects status and body from :func:`send` and renders a ``JSONResponse``."""

    def __init__(self, trace_header: str | None = None) -> None:
        self.trace_header = trace_header or get_error_settings().trace_header
        self.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        self.body: dict[str, Any] | None = None

    def set_status(self, status_code: int) -> None:
        self.status_code = status_code

    def write_json(self, body: dict[str, Any]) -> None:
        if self.body is not None:
            raise RuntimeError("Response body already written")
        self.body = body

    def to_response(self) -> JSONResponse:
        if self.body is None:
            raise RuntimeError("No error body was written")
        headers = _trace_headers(self.body.get("trace"), self.trace_header)
        return JSONResponse(status_code=self.status_code, content=self.body, headers=headers or None)


def _trace_headers(trace: Any, trace_header: str | None = None) -> dict[str, str]:
    if not isinstance(trace, str) or not trace:
        return {}
    return {trace_header or get_error_settings().trace_header: trace}


def get_trace(request: Request) -> str | None:
    """Return the trace token set by middleware or sent by the client."""
    trace = getattr(request.state, "trace", None)
    if isinstance(trace, str) and trace.strip():
        return trace
    header = request.headers.get(get_error_settings().trace_header)
    if header and header.strip():
        return header.strip()
    return None


def _http_error_kind(status_code: int) -> ServiceError:
    if status_code == status.HTTP_400_BAD_REQUEST:
        return ServiceError.BAD_REQUEST
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return ServiceError.UNAUTHORIZED
    if status_code == status.HTTP_402_PAYMENT_REQUIRED:
        return ServiceError.PAYMENT_REQUIRED
    if status_code == status.HTTP_403_FORBIDDEN:
        return ServiceError.FORBIDDEN
    if status_code == status.HTTP_404_NOT_FOUND:
        return ServiceError.NOT_FOUND
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return ServiceError.UNSUPPORTED_METHOD
    if status_code == status.HTTP_409_CONFLICT:
        return ServiceError.CONFLICT
    if status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        return ServiceError.TOO_MANY_REQUESTS
    if status_code == status.HTTP_501_NOT_IMPLEMENTED:
        return ServiceError.NOT_IMPLEMENTED
    if status_code == status.HTTP_502_BAD_GATEWAY:
        return ServiceError.BAD_GATEWAY
    if status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        return ServiceError.SERVICE_UNAVAILABLE
    if status_code == status.HTTP_504_GATEWAY_TIMEOUT:
        return ServiceError.GATEWAY_TIMEOUT
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ServiceError.SYSTEM_ERROR
    return ServiceError.BAD_REQUEST


def _respond(error: ApplicationError) -> JSONResponse:
    writer = JSONResponseWriter()
    send(error, writer)
    return writer.to_response()


async def application_error_handler(_: Request, exc: ApplicationError) -> JSONResponse:
    """Send classified errors as raised."""

    return _respond(exc)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report FastAPI validation errors as ``validation_error``."""

    return _respond(
        ApplicationError(
            ServiceError.VALIDATION_ERROR,
            "Request validation failed",
            get_trace(request) or DEFAULT_TRACE,
        )
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Classify framework HTTP exceptions by status code.

    The original status code is kept even when the chosen kind maps elsewhere.
    """

    description = exc.detail if isinstance(exc.detail, str) and exc.detail else "Request failed"
    error = ApplicationError(_http_error_kind(exc.status_code), description, get_trace(request) or DEFAULT_TRACE)
    headers = {**_trace_headers(error.trace), **(exc.headers or {})}
    return JSONResponse(status_code=exc.status_code, content=error.to_dict(), headers=headers)


def register_error_handlers(app: FastAPI, logger: FailureLogger | None = None) -> None:
    """Attach the error handlers to a FastAPI app instance.

    ``logger`` receives unhandled exceptions; the module logger of
    :mod:`service_errors.core.errors` is used when omitted.
    """

    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        writer = JSONResponseWriter()
        handle_failure(exc, writer, logger=logger, trace=get_trace(request))
        return writer.to_response()

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
