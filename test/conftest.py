"""
Test Configuration and Fixtures

This module provides:
- Environment setup that must happen before application modules read settings
- Shared fixtures: frozen clock, event/session ids

Architecture:
- Unit tests (test/**/unit/): pure domain and use-case tests with AsyncMock doubles
- Integration tests (test/**/integration/): real repositories on a file-backed SQLite database
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are instantiated at import time (src.platform.config.core_setting.settings)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Integration tests pass their own per-test URL; this default keeps stray engines off Postgres
    os.environ.setdefault(
        'DATABASE_URL_ASYNC', f'sqlite+aiosqlite:///{test_log_dir / "default_test.db"}'
    )
    os.environ['ENABLE_REAPER'] = 'false'
    os.environ['CREATE_TABLES_ON_STARTUP'] = 'true'
    os.environ.setdefault('SECRET_KEY', 'test-secret-key-with-enough-length-for-hs256')
    os.environ['SERVICE_API_KEY'] = 'test-service-key'


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from datetime import datetime, timezone  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
from uuid_utils.compat import uuid7  # noqa: E402

from src.platform.clock.clock import FrozenClock  # noqa: E402


TEST_START = datetime(2026, 3, 14, 19, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(TEST_START)


@pytest.fixture
def event_id() -> UUID:
    return uuid7()


@pytest.fixture
def session_id() -> str:
    return 'session-alice-0001'


@pytest.fixture
def other_session_id() -> str:
    return 'session-bob-0002'
