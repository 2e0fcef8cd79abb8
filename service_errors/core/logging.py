"""
Logging setup for services using the error handlers.

Unclassified failures are logged at error level with their traceback;
clients only ever see the generic description and the trace token.
"""

import logging
import sys

from service_errors.core.config import get_error_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def resolve_level(level: str) -> int:
    """Map a level name to its numeric value, INFO for unknown names."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    """Configure root logging to stdout.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
            Defaults to ``SERVICE_ERRORS_LOG_LEVEL``.
    """
    settings = get_error_settings()
    logging.basicConfig(
        level=resolve_level(level or settings.log_level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    logger.info("Configured error handling with settings=%s", settings.safe_for_logging())
