"""Shared pytest fixtures for the service_errors test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def _fresh_error_settings() -> Generator[None, None, None]:
    """Drop cached settings so each test sees its own environment."""
    from service_errors.core.config import get_error_settings

    get_error_settings.cache_clear()
    yield
    get_error_settings.cache_clear()
