"""
Module: timesheet_kernel.selectors.report_selector
Responsibility: Weekly reports built from stored entries with the pure
    aggregation engine: the customer -> project summary, chart groupings,
    per-day load classification, and the admin-only per-user timesheet
    summary.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Reports never fail on dangling catalog references; they label them
      "Unknown".
    - ``timesheet_summary`` is only available to actors who can manage
      timesheets.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from timesheet_kernel.domain.aggregation import (
    DEFAULT_HOURS_PER_DAY,
    DailyLoad,
    GroupBy,
    classify_daily_load,
    daily_totals,
    group_by_customer_then_project,
    group_hours,
    total_hours,
)
from timesheet_kernel.domain.calendar import require_week_start, week_end
from timesheet_kernel.domain.dtos import UserInfo, WeekStatus
from timesheet_kernel.domain.identity import can_manage_timesheets
from timesheet_kernel.exceptions import PermissionDeniedError
from timesheet_kernel.selectors.base import BaseSelector
from timesheet_kernel.selectors.catalog_selector import CatalogSelector
from timesheet_kernel.selectors.time_entry_selector import TimeEntrySelector
from timesheet_kernel.selectors.user_selector import UserSelector
from timesheet_kernel.selectors.week_status_selector import WeekStatusSelector


@dataclass(frozen=True)
class WeeklyReport:
    """Hours of one week grouped by customer, then project."""

    week_start: date
    summary: dict[str, dict[str, Decimal]]
    daily_totals: dict[date, Decimal]
    total_hours: Decimal
    user_id: UUID | None = None

    @property
    def week_end(self) -> date:
        return week_end(self.week_start)


@dataclass(frozen=True)
class UserWeekSummary:
    """One row of the admin timesheet summary."""

    user: UserInfo
    week_start: date
    status: WeekStatus
    days: dict[date, Decimal] = field(default_factory=dict)
    total_hours: Decimal = Decimal("0")


class ReportSelector(BaseSelector):

    def __init__(self, session, hours_per_day: Decimal = DEFAULT_HOURS_PER_DAY):
        super().__init__(session)
        self.hours_per_day = Decimal(hours_per_day)
        self._catalog = CatalogSelector(session)
        self._entries = TimeEntrySelector(session)
        self._users = UserSelector(session)
        self._weeks = WeekStatusSelector(session)

    def weekly_report(
        self, week_start: date, user_id: UUID | None = None,
    ) -> WeeklyReport:
        week_start = require_week_start(week_start)
        entries = self._entries.entries_for_week(week_start, user_id=user_id)
        return WeeklyReport(
            week_start=week_start,
            summary=group_by_customer_then_project(
                entries,
                self._catalog.customer_names(),
                self._catalog.project_names(),
            ),
            daily_totals=daily_totals(entries, week_start),
            total_hours=total_hours(entries),
            user_id=user_id,
        )

    def hours_by(
        self,
        by: GroupBy | str,
        start: date | None = None,
        end: date | None = None,
        user_id: UUID | None = None,
    ) -> dict[str, Decimal]:
        """Chart data: hours per customer, project or date over a range."""
        entries = self._entries.list_entries(user_id=user_id, start=start, end=end)
        return group_hours(
            entries,
            by,
            self._catalog.customer_names(),
            self._catalog.project_names(),
        )

    def daily_loads(self, user_id: UUID, week_start: date) -> dict[date, DailyLoad]:
        week_start = require_week_start(week_start)
        entries = self._entries.entries_for_week(week_start, user_id=user_id)
        return {
            day: classify_daily_load(hours, self.hours_per_day)
            for day, hours in daily_totals(entries, week_start).items()
        }

    def timesheet_summary(
        self, actor: UserInfo, week_start: date,
    ) -> list[UserWeekSummary]:
        """
        Every user's week at a glance: daily totals, weekly total, status.

        Raises:
            PermissionDeniedError: If ``actor`` cannot manage timesheets.
            NotWeekStartError: If ``week_start`` is not a Monday.
        """
        if not can_manage_timesheets(actor):
            raise PermissionDeniedError(str(actor.id), "view the timesheet summary")

        week_start = require_week_start(week_start)
        entries = self._entries.entries_for_week(week_start)
        rows: list[UserWeekSummary] = []
        for user in self._users.list_users():
            own = [e for e in entries if e.user_id == user.id]
            days = daily_totals(own, week_start)
            rows.append(
                UserWeekSummary(
                    user=user,
                    week_start=week_start,
                    status=self._weeks.status_of(user.id, week_start),
                    days=days,
                    total_hours=sum(days.values(), Decimal("0")),
                )
            )
        return rows
