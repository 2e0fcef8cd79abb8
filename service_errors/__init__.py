"""Error kinds, the application error value and the helpers that send it."""

from service_errors.core.codes import ERROR_STATUS_CODES
from service_errors.core.codes import ServiceError
from service_errors.core.codes import status_code_for
from service_errors.core.errors import ApplicationError
from service_errors.core.errors import ErrorResponder
from service_errors.core.errors import FailureLogger
from service_errors.core.errors import handle_failure
from service_errors.core.errors import send

__all__ = [
    "ERROR_STATUS_CODES",
    "ApplicationError",
    "ErrorResponder",
    "FailureLogger",
    "ServiceError",
    "handle_failure",
    "send",
    "status_code_for",
]
