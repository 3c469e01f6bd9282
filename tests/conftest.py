"""
Pytest fixtures for the deadline kernel test suite.

Provides:
- Structured logging configuration and log capture
- In-memory SQLite database sessions (one fresh database per test)
- Deterministic clocks, holiday fixtures and repositories

Environment Variables:
- DATABASE_URL: optional SQLAlchemy URL for the database-backed tests.
  Defaults to an in-memory SQLite database.
"""

import json
import logging
import os
from datetime import date, datetime, UTC
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from deadline_engines.federal_holidays import as_holiday_records
from deadline_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from deadline_kernel.db.immutability import register_immutability_listeners
from deadline_kernel.domain.clock import DeterministicClock
from deadline_kernel.domain.repository import InMemoryDeadlineRepository
from deadline_kernel.domain.values import HolidayRecord, HolidayType, JurisdictionInfo
from deadline_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

DEFAULT_DATABASE_URL = "sqlite://"

TEST_JURISDICTION = "US-CA-SF"
FIXED_NOW = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture deadline_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            engine.calculate_deadline(...)
            logs = captured_logs()
            assert any(r["message"] == "deadline_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("deadline_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


def get_database_url() -> str:
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


@pytest.fixture(scope="function")
def session() -> Generator[Session, None, None]:
    """Provide a session on a freshly created schema.

    Immutability listeners are registered for every test; tests that need
    to bypass them unregister explicitly.
    """
    init_engine_from_url(get_database_url())
    create_tables()
    register_immutability_listeners()
    sess = get_session()
    yield sess
    try:
        sess.rollback()
        sess.close()
        drop_tables()
    finally:
        reset_engine()


# =============================================================================
# Clock fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock(FIXED_NOW)


# =============================================================================
# Holiday fixtures
# =============================================================================


def make_holiday(
    day: date,
    name: str = "Test Holiday",
    holiday_type: HolidayType = HolidayType.COURT,
    jurisdictions=(TEST_JURISDICTION,),
    affects_courts: bool = True,
    is_active: bool = True,
) -> HolidayRecord:
    return HolidayRecord(
        id=f"{holiday_type.value}:{day.isoformat()}:{name}",
        date=day,
        name=name,
        type=holiday_type,
        jurisdictions=frozenset(jurisdictions),
        affects_courts=affects_courts,
        is_active=is_active,
    )


@pytest.fixture
def federal_holidays_2024():
    return as_holiday_records([2024])


@pytest.fixture
def repository(deterministic_clock, federal_holidays_2024):
    """In-memory repository seeded with 2024 federal holidays and one jurisdiction."""
    return InMemoryDeadlineRepository(
        holidays=federal_holidays_2024,
        jurisdictions=[
            JurisdictionInfo(
                id=TEST_JURISDICTION,
                settings={"courtName": "Superior Court"},
                business_hours={"open": "08:30", "close": "16:00"},
                time_zone="America/Los_Angeles",
            ),
        ],
        clock=deterministic_clock,
    )


@pytest.fixture
def holiday_factory():
    """Factory for HolidayRecords; defaults to a court holiday of TEST_JURISDICTION."""
    return make_holiday
