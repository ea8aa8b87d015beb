"""
ISO week arithmetic.

Weeks start on Monday.  No timezone arithmetic happens here: callers hand
in plain ``date`` values already resolved to the user's calendar.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from timesheet_kernel.exceptions import NotWeekStartError

DAYS_PER_WEEK = 7


def parse_iso_date(value: date | str) -> date:
    """Accept a ``date`` or an ISO 8601 ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError(f"Cannot parse date from {value!r}")


def iso_week_start(day: date) -> date:
    """The Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def is_week_start(day: date) -> bool:
    return day.weekday() == 0


def require_week_start(week_start: date) -> date:
    """Return ``week_start`` unchanged; raise NotWeekStartError unless a Monday."""
    if not is_week_start(week_start):
        raise NotWeekStartError(week_start.isoformat())
    return week_start


def week_dates(week_start: date) -> tuple[date, ...]:
    """The seven dates ``[week_start, week_start + 6]``."""
    return tuple(week_start + timedelta(days=i) for i in range(DAYS_PER_WEEK))


def week_end(week_start: date) -> date:
    return week_start + timedelta(days=DAYS_PER_WEEK - 1)


def in_week(day: date, week_start: date) -> bool:
    return week_start <= day <= week_end(week_start)

