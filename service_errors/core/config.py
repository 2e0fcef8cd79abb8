"""Configuration helpers for the error responders."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_TRACE_HEADER = "X-Trace-Id"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class ErrorSettings:
    """Runtime settings for the FastAPI error handlers."""

    trace_header: str
    log_level: str

    def safe_for_logging(self) -> dict[str, str]:
        """Return settings as a plain dict for startup logs."""
        return {
            "trace_header": self.trace_header,
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def get_error_settings() -> ErrorSettings:
    """Load error handler settings from the environment."""
    return ErrorSettings(
        trace_header=os.getenv("SERVICE_ERRORS_TRACE_HEADER") or DEFAULT_TRACE_HEADER,
        log_level=os.getenv("SERVICE_ERRORS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
