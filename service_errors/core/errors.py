"""Application error value and the helpers that write it onto a response."""

from __future__ import annotations

import logging
from typing import Any
from typing import Protocol

from service_errors.core.codes import ServiceError
from service_errors.core.codes import status_code_for
from service_errors.schemas.error import ErrorResponse

DEFAULT_DESCRIPTION = "An error occurred"
DEFAULT_TRACE = "sys_int_helper"
SYSTEM_ERROR_DESCRIPTION = "Internal system error occurred, administrator was notified"

_fallback_logger = logging.getLogger(__name__)


class ErrorResponder(Protocol):
    """Outbound response capability used by :func:`send`."""

    def set_status(self, status_code: int) -> None: ...

    def write_json(self, body: dict[str, Any]) -> None: ...


class FailureLogger(Protocol):
    """Anything with an error-level ``error`` method, e.g. ``logging.Logger``."""

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None: ...


def _coerce_kind(error: ServiceError | str) -> ServiceError | str:
    try:
        return ServiceError(error)
    except ValueError:
        return error


class ApplicationError(Exception):
    """Classified failure carrying its kind, status code, description and trace.

    Values are immutable once built; the status code is always derived from
    the kind and falls back to 500 for kinds missing from the table.
    """

    __slots__ = ("_error", "_code", "_error_description", "_trace")

    def __init__(
        self,
        error: ServiceError | str,
        error_description: str = "",
        trace: str = "",
        original_error: BaseException | None = None,
    ) -> None:
        original_message = str(original_error) if original_error is not None else ""
        description = error_description or original_message or DEFAULT_DESCRIPTION
        super().__init__(description)
        kind = _coerce_kind(error)
        object.__setattr__(self, "_error", kind)
        object.__setattr__(self, "_code", status_code_for(kind))
        object.__setattr__(self, "_error_description", description)
        object.__setattr__(self, "_trace", trace)
        if original_error is not None:
            self.__cause__ = original_error

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__slots__ or name in {"error", "code", "error_description", "trace"}:
            raise AttributeError(f"ApplicationError.{name.lstrip('_')} is read-only")
        super().__setattr__(name, value)

    def __reduce__(self) -> tuple[Any, ...]:
        # Rebuild from the real fields; the default uses ``args``, which only holds the description.
        return (type(self), (self._error, self._error_description, self._trace, self.__cause__))

    @property
    def error(self) -> ServiceError | str:
        return self._error

    @property
    def code(self) -> int:
        return self._code

    @property
    def error_description(self) -> str:
        return self._error_description

    @property
    def trace(self) -> str:
        return self._trace

    @property
    def error_tag(self) -> str:
        """Wire value of the kind."""
        return self._error.value if isinstance(self._error, ServiceError) else str(self._error)

    def to_dict(self) -> dict[str, str]:
        payload = ErrorResponse(error=self.error_tag, error_description=self.error_description, trace=self.trace)
        return payload.model_dump()

    def __repr__(self) -> str:
        return (
            f"ApplicationError(error={self.error_tag!r}, code={self.code}, "
            f"error_description={self.error_description!r}, trace={self.trace!r})"
        )


def send(error: ApplicationError, response: ErrorResponder) -> None:
    """Write ``error`` onto ``response``: status code first, then the JSON body."""
    response.set_status(error.code)
    response.write_json(error.to_dict())


def handle_failure(
    raised: BaseException | object,
    response: ErrorResponder,
    logger: FailureLogger | None = None,
    trace: str | None = None,
) -> None:
    """Send any failure as an error response.

    Classified errors are sent as-is. Anything else is logged for operators
    and replaced by a generic ``system_error`` so internals never reach the
    client.
    """
    if isinstance(raised, ApplicationError):
        send(raised, response)
        return

    trace = trace or DEFAULT_TRACE
    sink = logger if logger is not None else _fallback_logger
    exc_info = (type(raised), raised, raised.__traceback__) if isinstance(raised, BaseException) else None
    sink.error("Unhandled failure (trace=%s): %r", trace, raised, exc_info=exc_info)

    send(ApplicationError(ServiceError.SYSTEM_ERROR, SYSTEM_ERROR_DESCRIPTION, trace), response)
