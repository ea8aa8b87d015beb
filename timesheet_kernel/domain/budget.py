"""
Budget actuals calculator (``timesheet_kernel.domain.budget``).

Responsibility
--------------
Converts logged hours on a project into day-equivalents and cost, and
compares both with the project's budgets.

Architecture position
---------------------
**Kernel domain layer** -- pure functions.  ZERO I/O.  The caller resolves
daily rates (``rates_by_user``) before calling.

Invariants enforced
-------------------
* ``days = sum(hours) / hours_per_day``, rounded to one decimal place.
* ``cost = sum(hours / hours_per_day * rate of the entry's owner)``,
  rounded to a whole currency unit.  An owner missing from
  ``rates_by_user`` (or without a rate) contributes zero cost.
* ``utilization_percent = min(100, round(days / budget_days * 100))`` when
  ``budget_days > 0``, else ``None`` ("no budget set").  Cost utilization
  follows the same rule against ``budget_cost``.
* All rounding is ROUND_HALF_UP.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from timesheet_kernel.domain.aggregation import DEFAULT_HOURS_PER_DAY, ZERO_HOURS
from timesheet_kernel.domain.dtos import ProjectActuals, ProjectInfo, TimeEntryInfo

DAYS_QUANTUM = Decimal("0.1")
COST_QUANTUM = Decimal("1")
MAX_UTILIZATION = 100


def round_days(value: Decimal) -> Decimal:
    return value.quantize(DAYS_QUANTUM, rounding=ROUND_HALF_UP)


def round_cost(value: Decimal) -> Decimal:
    return value.quantize(COST_QUANTUM, rounding=ROUND_HALF_UP)


def utilization_percent(actual: Decimal, budget: Decimal | None) -> int | None:
    """Percentage of budget used, clamped at 100; None without a positive budget."""
    if budget is None or budget <= 0:
        return None
    percent = (actual / budget * 100).quantize(COST_QUANTUM, rounding=ROUND_HALF_UP)
    return min(MAX_UTILIZATION, int(percent))


def _remaining(actual: Decimal, budget: Decimal | None) -> Decimal | None:
    if budget is None or budget <= 0:
        return None
    return max(ZERO_HOURS, budget - actual)


def compute_project_actuals(
    project: ProjectInfo,
    entries: Iterable[TimeEntryInfo],
    rates_by_user: Mapping[UUID, Decimal | None],
    hours_per_day: Decimal = DEFAULT_HOURS_PER_DAY,
) -> ProjectActuals:
    """
    Actual days and cost logged against ``project``.

    Entries for other projects are ignored, so callers may pass an
    unfiltered set.
    """
    if hours_per_day <= 0:
        raise ValueError(f"hours_per_day must be positive, got {hours_per_day}")

    hours = ZERO_HOURS
    raw_cost = ZERO_HOURS
    for entry in entries:
        if entry.project_id != project.id:
            continue
        hours += entry.hours
        rate = rates_by_user.get(entry.user_id) or ZERO_HOURS
        raw_cost += entry.hours / hours_per_day * rate

    raw_days = hours / hours_per_day
    days = round_days(raw_days)
    cost = round_cost(raw_cost)

    return ProjectActuals(
        project_id=project.id,
        hours=hours,
        days=days,
        cost=cost,
        budget_days=project.budget_days,
        budget_cost=project.budget_cost,
        utilization_percent=utilization_percent(raw_days, project.budget_days),
        cost_utilization_percent=utilization_percent(raw_cost, project.budget_cost),
        remaining_days=_remaining(days, project.budget_days),
        remaining_cost=_remaining(cost, project.budget_cost),
    )
