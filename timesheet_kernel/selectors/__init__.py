"""Selectors - read-only queries returning DTOs."""

from timesheet_kernel.selectors.budget_selector import BudgetSelector
from timesheet_kernel.selectors.catalog_selector import CatalogSelector
from timesheet_kernel.selectors.report_selector import (
    ReportSelector,
    UserWeekSummary,
    WeeklyReport,
)
from timesheet_kernel.selectors.time_entry_selector import TimeEntrySelector
from timesheet_kernel.selectors.user_selector import UserSelector
from timesheet_kernel.selectors.week_status_selector import WeekStatusSelector

__all__ = [
    "BudgetSelector",
    "CatalogSelector",
    "ReportSelector",
    "TimeEntrySelector",
    "UserSelector",
    "UserWeekSummary",
    "WeekStatusSelector",
    "WeeklyReport",
]
