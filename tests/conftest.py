"""Root test fixtures shared across all test types.

Unit tests use only what is here. Database fixtures live in
tests/integration/conftest.py.
"""

import os
import tempfile
from pathlib import Path

# Settings are read at import time (the password hasher is built on import)
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(tempfile.mkdtemp(prefix='portal-tests-')) / 'portal.db'}",
)
# Cheap hashes; the parameters are not what is under test
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Generator

import pytest
import structlog

from src.portal.core.audit_context import clear_audit_context
from src.portal.core.config import get_settings
from src.portal.core.logging import clear_request_context
from tests.factories import BASE_TIME
from tests.helpers import FrozenClock

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def clock() -> FrozenClock:
    """A clock frozen at BASE_TIME that tests can move forward."""
    return FrozenClock(BASE_TIME)


@pytest.fixture(autouse=True)
def _clean_context() -> Generator[None]:
    """No request or audit context leaks between tests."""
    clear_request_context()
    clear_audit_context()
    yield
    clear_request_context()
    clear_audit_context()
    structlog.reset_defaults()
