"""Error kinds and their HTTP status codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from fastapi import status

DEFAULT_STATUS_CODE = status.HTTP_500_INTERNAL_SERVER_ERROR


class ServiceError(str, Enum):
    VALIDATION_ERROR = "validation_error"
    INVALID_REQUEST = "invalid_request"
    ALREADY_EXISTS = "already_exists"
    INVALID_TOKEN = "invalid_token"
    AUTH_ERROR = "auth_error"
    INSUFFICIENT_SCOPE = "insufficient_scope"
    NOT_FOUND = "not_found"
    UNSUPPORTED_METHOD = "unsupported_method"
    SYSTEM_ERROR = "system_error"
    CONFIGURATION_ERROR = "configuration_error"
    SERVICE_ERROR = "service_error"
    DATA_ERROR = "data_error"

    # Standard HTTP semantics
    BAD_REQUEST = "bad_request"
    PAYMENT_REQUIRED = "payment_required"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    TOO_MANY_REQUESTS = "too_many_requests"
    NOT_IMPLEMENTED = "not_implemented"
    BAD_GATEWAY = "bad_gateway"
    SERVICE_UNAVAILABLE = "service_unavailable"
    GATEWAY_TIMEOUT = "gateway_timeout"


ERROR_STATUS_CODES: Mapping[ServiceError, int] = MappingProxyType(
    {
        ServiceError.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
        ServiceError.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
        ServiceError.ALREADY_EXISTS: status.HTTP_400_BAD_REQUEST,
        ServiceError.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
        ServiceError.AUTH_ERROR: status.HTTP_403_FORBIDDEN,
        ServiceError.INSUFFICIENT_SCOPE: status.HTTP_403_FORBIDDEN,
        ServiceError.NOT_FOUND: status.HTTP_404_NOT_FOUND,
        ServiceError.UNSUPPORTED_METHOD: status.HTTP_405_METHOD_NOT_ALLOWED,
        ServiceError.SYSTEM_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
        ServiceError.CONFIGURATION_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
        ServiceError.SERVICE_ERROR: status.HTTP_502_BAD_GATEWAY,
        ServiceError.DATA_ERROR: status.HTTP_409_CONFLICT,
        ServiceError.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
        ServiceError.PAYMENT_REQUIRED: status.HTTP_402_PAYMENT_REQUIRED,
        ServiceError.CONFLICT: status.HTTP_409_CONFLICT,
        ServiceError.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
        ServiceError.FORBIDDEN: status.HTTP_403_FORBIDDEN,
        ServiceError.TOO_MANY_REQUESTS: status.HTTP_429_TOO_MANY_REQUESTS,
        ServiceError.NOT_IMPLEMENTED: status.HTTP_501_NOT_IMPLEMENTED,
        ServiceError.BAD_GATEWAY: status.HTTP_502_BAD_GATEWAY,
        ServiceError.SERVICE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
        ServiceError.GATEWAY_TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    }
)

_missing = [kind.value for kind in ServiceError if kind not in ERROR_STATUS_CODES]
if _missing:
    raise RuntimeError(f"Status code table is missing error kinds: {', '.join(_missing)}")


def status_code_for(kind: ServiceError | str) -> int:
    """Return the HTTP status for an error kind, 500 when it is not mapped."""
    try:
        return ERROR_STATUS_CODES.get(ServiceError(kind), DEFAULT_STATUS_CODE)
    except ValueError:
        return DEFAULT_STATUS_CODE


def is_client_error(kind: ServiceError | str) -> bool:
    return 400 <= status_code_for(kind) < 500


def is_server_error(kind: ServiceError | str) -> bool:
    return status_code_for(kind) >= 500
