"""
Pytest fixtures for the timesheet kernel test suite.

Provides:
- An in-memory SQLite engine per test session
- A session per test, joined to an outer transaction that is rolled back
- A DeterministicClock, kernel services wired to both
- Actors (admin, regular_user, other_user) and catalog factories
- Structured log capture
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from timesheet_kernel.db.engine import (
    DEFAULT_DATABASE_URL,
    build_engine,
    create_tables,
    drop_tables,
)
from timesheet_kernel.domain.clock import DeterministicClock
from timesheet_kernel.domain.dtos import Role
from timesheet_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from timesheet_kernel.selectors.budget_selector import BudgetSelector
from timesheet_kernel.selectors.report_selector import ReportSelector
from timesheet_kernel.services.catalog_service import CatalogService
from timesheet_kernel.services.time_entry_service import TimeEntryService
from timesheet_kernel.services.user_service import UserService
from timesheet_kernel.services.week_status_service import WeekStatusService

# Monday of the submit/approve scenario week
WEEK = date(2024, 4, 15)

# Actor id for seeding fixtures
TEST_ACTOR_ID = uuid4()


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
    Capture timesheet_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, entry_service):
            entry_service.add_time_entry(...)
            assert any(r["message"] == "time_entry_added" for r in captured_logs())
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("timesheet_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture(scope="session")
def engine():
    eng = build_engine(DEFAULT_DATABASE_URL)
    create_tables(eng)
    yield eng
    drop_tables(eng)
    eng.dispose()


@pytest.fixture
def session(engine):
    """
    Session bound to a connection whose outer transaction is rolled back.

    Services only flush, so nothing a test writes survives it.
    """
    connection = engine.connect()
    transaction = connection.begin()
    sess = Session(bind=connection, expire_on_commit=False)
    yield sess
    sess.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def clock():
    return DeterministicClock()


@pytest.fixture
def test_actor_id():
    return TEST_ACTOR_ID


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def user_service(session, clock):
    return UserService(session, clock)


@pytest.fixture
def catalog_service(session, clock):
    return CatalogService(session, clock)


@pytest.fixture
def week_service(session, clock):
    return WeekStatusService(session, clock)


@pytest.fixture
def strict_week_service(session, clock):
    return WeekStatusService(session, clock, enforce_transitions=True)


@pytest.fixture
def entry_service(session, clock, week_service):
    return TimeEntryService(session, clock, week_service)


@pytest.fixture
def report_selector(session):
    return ReportSelector(session)


@pytest.fixture
def budget_selector(session):
    return BudgetSelector(session)


# =============================================================================
# Actors and catalog
# =============================================================================


@pytest.fixture
def admin(user_service, test_actor_id):
    return user_service.add_user(
        "Ada Admin", "ada@example.com", test_actor_id,
        role=Role.ADMIN, daily_rate=Decimal("800"),
    )


@pytest.fixture
def regular_user(user_service, test_actor_id):
    return user_service.add_user(
        "Uma User", "uma@example.com", test_actor_id,
        role=Role.USER, daily_rate=Decimal("400"),
    )


@pytest.fixture
def other_user(user_service, test_actor_id):
    return user_service.add_user(
        "Otto Other", "otto@example.com", test_actor_id, daily_rate=Decimal("600"),
    )


@pytest.fixture
def make_customer(catalog_service, test_actor_id):
    def _make(name="Acme", active=True, **kwargs):
        return catalog_service.add_customer(name, test_actor_id, active=active, **kwargs)

    return _make


@pytest.fixture
def make_project(catalog_service, test_actor_id):
    def _make(customer, name="Website", active=True, **kwargs):
        return catalog_service.add_project(
            name, customer.id, test_actor_id, active=active, **kwargs,
        )

    return _make


@pytest.fixture
def customer(make_customer):
    return make_customer("Acme")


@pytest.fixture
def project(make_project, customer):
    return make_project(customer, "Website", budget_days=Decimal("20"))
