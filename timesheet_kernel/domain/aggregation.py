"""
Aggregation engine (``timesheet_kernel.domain.aggregation``).

Responsibility
--------------
Pure, side-effect-free totals and groupings over a set of time entries:
daily and weekly totals, the customer -> project summary used by the
weekly report, single-level groupings for charts, and the per-project
weekly grid.

Architecture position
---------------------
**Kernel domain layer** -- pure functions.  ZERO I/O.  Callers pass the
entries and, where labels are needed, id -> name lookups.

Invariants enforced
-------------------
* ``weekly_total(W) == sum(daily_totals(W).values())`` exactly: the weekly
  total is computed from the seven daily totals, nothing else.
* Lookups never raise: a day with no entries totals zero, an id missing
  from a name lookup is labelled ``"Unknown"``.
* Groupings keep the insertion order of first occurrence.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from timesheet_kernel.domain.calendar import in_week, week_dates
from timesheet_kernel.domain.dtos import TimeEntryInfo

UNKNOWN_LABEL = "Unknown"
ZERO_HOURS = Decimal("0")
DEFAULT_HOURS_PER_DAY = Decimal("8")


class GroupBy(str, Enum):
    """Single-level grouping dimension for chart data."""

    CUSTOMER = "customer"
    PROJECT = "project"
    DATE = "date"


class DailyLoad(str, Enum):
    """How full a day is relative to a standard working day."""

    EMPTY = "empty"
    LIGHT = "light"
    PARTIAL = "partial"
    FULL = "full"
    OVER = "over"


def _label(names: Mapping[UUID, str] | None, key: UUID) -> str:
    if names is None:
        return UNKNOWN_LABEL
    return names.get(key) or UNKNOWN_LABEL


def total_hours(entries: Iterable[TimeEntryInfo]) -> Decimal:
    return sum((e.hours for e in entries), ZERO_HOURS)


def daily_total(entries: Iterable[TimeEntryInfo], day: date) -> Decimal:
    """Sum of hours of entries dated ``day``."""
    return sum((e.hours for e in entries if e.entry_date == day), ZERO_HOURS)


def daily_totals(
    entries: Iterable[TimeEntryInfo], week_start: date,
) -> dict[date, Decimal]:
    """Monday..Sunday totals for the week, zero for days without entries."""
    totals = {day: ZERO_HOURS for day in week_dates(week_start)}
    for entry in entries:
        if entry.entry_date in totals:
            totals[entry.entry_date] += entry.hours
    return totals


def weekly_total(entries: Iterable[TimeEntryInfo], week_start: date) -> Decimal:
    return sum(daily_totals(entries, week_start).values(), ZERO_HOURS)


def entries_in_week(
    entries: Iterable[TimeEntryInfo], week_start: date,
) -> list[TimeEntryInfo]:
    return [e for e in entries if in_week(e.entry_date, week_start)]


def group_by_customer_then_project(
    entries: Iterable[TimeEntryInfo],
    customer_names: Mapping[UUID, str] | None = None,
    project_names: Mapping[UUID, str] | None = None,
) -> dict[str, dict[str, Decimal]]:
    """
    ``{customer name: {project name: hours}}`` for the summary report.

    Dangling customer or project ids group under ``"Unknown"``.
    """
    summary: dict[str, dict[str, Decimal]] = {}
    for entry in entries:
        customer = _label(customer_names, entry.customer_id)
        project = _label(project_names, entry.project_id)
        projects = summary.setdefault(customer, {})
        projects[project] = projects.get(project, ZERO_HOURS) + entry.hours
    return summary


def group_hours(
    entries: Iterable[TimeEntryInfo],
    by: GroupBy | str,
    customer_names: Mapping[UUID, str] | None = None,
    project_names: Mapping[UUID, str] | None = None,
) -> dict[str, Decimal]:
    """Hours per customer, per project, or per ISO date."""
    by = GroupBy(by)
    data: dict[str, Decimal] = {}
    for entry in entries:
        if by is GroupBy.CUSTOMER:
            key = _label(customer_names, entry.customer_id)
        elif by is GroupBy.PROJECT:
            key = _label(project_names, entry.project_id)
        else:
            key = entry.entry_date.isoformat()
        data[key] = data.get(key, ZERO_HOURS) + entry.hours
    return data


def project_week_grid(
    entries: Iterable[TimeEntryInfo], week_start: date,
) -> dict[tuple[UUID, UUID], dict[date, Decimal]]:
    """
    One row per (customer, project) worked in the week, seven cells each.

    Entries outside the week are ignored.
    """
    days = week_dates(week_start)
    grid: dict[tuple[UUID, UUID], dict[date, Decimal]] = {}
    for entry in entries:
        if entry.entry_date not in days:
            continue
        key = (entry.customer_id, entry.project_id)
        row = grid.get(key)
        if row is None:
            row = grid[key] = {day: ZERO_HOURS for day in days}
        row[entry.entry_date] += entry.hours
    return grid


def classify_daily_load(
    hours: Decimal, hours_per_day: Decimal = DEFAULT_HOURS_PER_DAY,
) -> DailyLoad:
    """Bucket a daily total: none, under half a day, partial, a full day, overtime."""
    if hours <= 0:
        return DailyLoad.EMPTY
    if hours > hours_per_day:
        return DailyLoad.OVER
    if hours == hours_per_day:
        return DailyLoad.FULL
    if hours < hours_per_day / 2:
        return DailyLoad.LIGHT
    return DailyLoad.PARTIAL
