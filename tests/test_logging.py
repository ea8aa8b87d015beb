"""
Tests for structured logging (timesheet_kernel/logging_config.py).

Covers:
- JSON line shape: base keys, extras, non-JSON values
- Kernel exceptions expanded into exc_* keys
- LogContext set/bind/clear, field validation and isolation per thread
- configure_logging idempotency and level names
"""

import json
import logging
import threading
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from timesheet_kernel.domain.dtos import WeekStatus
from timesheet_kernel.exceptions import LockedWeekError
from timesheet_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def lines():
    """Configure logging into a buffer; call the fixture value to read records."""
    stream = StringIO()
    configure_logging(stream=stream, level=logging.DEBUG)

    def _read() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    return _read


class TestRecordShape:

    def test_base_keys(self, lines):
        get_logger("services.time_entry").info("time_entry_added")

        [record] = lines()
        assert record["level"] == "INFO"
        assert record["message"] == "time_entry_added"
        assert record["logger"] == "timesheet_kernel.services.time_entry"
        assert record["ts"].endswith("+00:00")

    def test_extras_become_top_level_keys(self, lines):
        entry_id = uuid4()
        get_logger("test").info(
            "week_status_changed",
            extra={
                "entry_id": entry_id,
                "hours": Decimal("7.50"),
                "week": date(2024, 4, 15),
                "to_status": WeekStatus.APPROVED,
                "count": 3,
            },
        )

        [record] = lines()
        assert record["entry_id"] == str(entry_id)
        assert record["hours"] == "7.50"
        assert record["week"] == "2024-04-15"
        assert record["to_status"] == "approved"
        assert record["count"] == 3

    def test_plain_exception(self, lines):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        [record] = lines()
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "exc_code" not in record
        assert "Traceback" in record["traceback"]

    def test_kernel_exception_attributes(self, lines):
        try:
            raise LockedWeekError("u-1", "2024-04-15", "pending")
        except LockedWeekError:
            get_logger("test").warning("timesheet_locked", exc_info=True)

        [record] = lines()
        assert record["exc_code"] == "TIMESHEET_LOCKED"
        assert record["exc_type"] == "LockedWeekError"
        assert record["exc_user_id"] == "u-1"
        assert record["exc_week_start"] == "2024-04-15"
        assert record["exc_status"] == "pending"

    def test_formatter_usable_on_its_own_handler(self):
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter())
        logger = logging.getLogger("standalone.timesheet.test")
        logger.addHandler(handler)
        logger.propagate = False
        try:
            logger.warning("standalone")
        finally:
            logger.removeHandler(handler)

        assert json.loads(stream.getvalue())["message"] == "standalone"


class TestLogContext:

    def test_context_copied_into_records(self, lines):
        LogContext.set(correlation_id="abc-123", week_start="2024-04-15")
        get_logger("test").info("with_context")

        [record] = lines()
        assert record["correlation_id"] == "abc-123"
        assert record["week_start"] == "2024-04-15"
        assert "actor_id" not in record

    def test_context_beats_extra_of_same_name(self, lines):
        LogContext.set(user_id="from-context")
        get_logger("test").info("clash", extra={"user_id": "from-extra"})

        assert lines()[0]["user_id"] == "from-context"

    def test_set_is_additive_and_ignores_none(self):
        LogContext.set(correlation_id="a")
        LogContext.set(actor_id="b", correlation_id=None)
        assert LogContext.get_all() == {"correlation_id": "a", "actor_id": "b"}

    def test_values_are_stringified(self):
        actor = uuid4()
        LogContext.set(actor_id=actor, week_start=date(2024, 4, 15))
        assert LogContext.get_all() == {
            "actor_id": str(actor),
            "week_start": "2024-04-15",
        }

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            LogContext.set(project_id="p")
        with pytest.raises(TypeError):
            with LogContext.bind(tenant="t"):
                pass

    def test_bind_restores_previous_values(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner", entry_id="e-1"):
            assert LogContext.get_all() == {
                "correlation_id": "inner",
                "entry_id": "e-1",
            }
        assert LogContext.get_all() == {"correlation_id": "outer"}

    def test_bind_restores_after_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(actor_id="a"):
                raise RuntimeError("fail")
        assert LogContext.get_all() == {}

    def test_clear(self):
        LogContext.set(correlation_id="c", user_id="u")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_threads_do_not_share_context(self):
        LogContext.set(actor_id="main")
        seen = {}

        def worker():
            LogContext.set(actor_id="worker")
            seen["worker"] = LogContext.get_all()["actor_id"]

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert seen["worker"] == "worker"
        assert LogContext.get_all() == {"actor_id": "main"}


class TestConfigureLogging:

    def test_second_call_is_ignored(self):
        first, second = StringIO(), StringIO()
        configure_logging(stream=first)
        configure_logging(stream=second, level=logging.DEBUG)

        root = logging.getLogger("timesheet_kernel")
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_level_name_accepted(self):
        configure_logging(stream=StringIO(), level="warning")
        assert logging.getLogger("timesheet_kernel").level == logging.WARNING

    def test_info_level_drops_debug(self):
        stream = StringIO()
        configure_logging(stream=stream)
        logger = get_logger("test")
        logger.debug("hidden")
        logger.info("shown")

        messages = [json.loads(line)["message"] for line in stream.getvalue().splitlines()]
        assert messages == ["shown"]

    def test_bad_level_leaves_logging_configurable(self):
        with pytest.raises(ValueError):
            configure_logging(stream=StringIO(), level="loudest")
        assert logging.getLogger("timesheet_kernel").handlers == []

        stream = StringIO()
        configure_logging(stream=stream)
        get_logger("test").info("after_bad_level")
        assert json.loads(stream.getvalue())["message"] == "after_bad_level"

    def test_reset_allows_reconfiguration(self):
        configure_logging(stream=StringIO())
        reset_logging()
        stream = StringIO()
        configure_logging(stream=stream)
        get_logger("test").info("again")
        assert json.loads(stream.getvalue())["message"] == "again"

    def test_children_inherit_handler(self, lines):
        get_logger("deep.nested.module").debug("hierarchy")

        [record] = lines()
        assert record["logger"] == "timesheet_kernel.deep.nested.module"
