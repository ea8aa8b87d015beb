"""
Domain layer - pure functions and value objects.

Nothing here touches the database, the clock (except through an injected
``Clock``) or the logger.
"""

from timesheet_kernel.domain.aggregation import (
    UNKNOWN_LABEL,
    DailyLoad,
    GroupBy,
    classify_daily_load,
    daily_total,
    daily_totals,
    group_by_customer_then_project,
    group_hours,
    project_week_grid,
    total_hours,
    weekly_total,
)
from timesheet_kernel.domain.budget import compute_project_actuals
from timesheet_kernel.domain.calendar import iso_week_start, week_dates
from timesheet_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from timesheet_kernel.domain.dtos import (
    CustomerInfo,
    ProjectActuals,
    ProjectInfo,
    Role,
    TimeEntryInfo,
    UserInfo,
    WeekRow,
    WeekStatus,
    WeekStatusInfo,
)
from timesheet_kernel.domain.identity import can_act_for, can_manage_timesheets
from timesheet_kernel.domain.snapshot import StoreSnapshot, snapshot_from_dict
from timesheet_kernel.domain.week_status import (
    WeekAction,
    allowed_transitions,
    can_edit_timesheet,
)

__all__ = [
    "UNKNOWN_LABEL",
    "Clock",
    "CustomerInfo",
    "DailyLoad",
    "DeterministicClock",
    "GroupBy",
    "ProjectActuals",
    "ProjectInfo",
    "Role",
    "StoreSnapshot",
    "SystemClock",
    "TimeEntryInfo",
    "UserInfo",
    "WeekAction",
    "WeekRow",
    "WeekStatus",
    "WeekStatusInfo",
    "allowed_transitions",
    "can_act_for",
    "can_edit_timesheet",
    "can_manage_timesheets",
    "classify_daily_load",
    "compute_project_actuals",
    "daily_total",
    "daily_totals",
    "group_by_customer_then_project",
    "group_hours",
    "iso_week_start",
    "project_week_grid",
    "snapshot_from_dict",
    "total_hours",
    "week_dates",
    "weekly_total",
]
