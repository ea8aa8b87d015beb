"""
Module: timesheet_kernel.selectors.time_entry_selector
Responsibility: Read-only queries over time entries: by id, day, week, user
    and project.
Architecture position: Kernel > Selectors.

Entries are returned ordered by (entry_date, created_at, id).
"""

from datetime import date
from uuid import UUID

from sqlalchemy import func, select

from timesheet_kernel.domain.calendar import week_end
from timesheet_kernel.domain.dtos import TimeEntryInfo
from timesheet_kernel.exceptions import TimeEntryNotFoundError
from timesheet_kernel.models import TimeEntry
from timesheet_kernel.selectors.base import BaseSelector
from timesheet_kernel.selectors.converters import entry_to_info

_ORDERING = (TimeEntry.entry_date, TimeEntry.created_at, TimeEntry.id)


class TimeEntrySelector(BaseSelector):

    def find_entry(self, entry_id: UUID) -> TimeEntryInfo | None:
        entry = self.session.get(TimeEntry, entry_id)
        return entry_to_info(entry) if entry else None

    def get_entry(self, entry_id: UUID) -> TimeEntryInfo:
        info = self.find_entry(entry_id)
        if info is None:
            raise TimeEntryNotFoundError(str(entry_id))
        return info

    def list_entries(
        self,
        user_id: UUID | None = None,
        start: date | None = None,
        end: date | None = None,
        project_id: UUID | None = None,
        customer_id: UUID | None = None,
    ) -> list[TimeEntryInfo]:
        """All entries matching every given filter; ``start``/``end`` are inclusive."""
        stmt = select(TimeEntry)
        if user_id is not None:
            stmt = stmt.where(TimeEntry.user_id == user_id)
        if start is not None:
            stmt = stmt.where(TimeEntry.entry_date >= start)
        if end is not None:
            stmt = stmt.where(TimeEntry.entry_date <= end)
        if project_id is not None:
            stmt = stmt.where(TimeEntry.project_id == project_id)
        if customer_id is not None:
            stmt = stmt.where(TimeEntry.customer_id == customer_id)
        stmt = stmt.order_by(*_ORDERING)
        return [entry_to_info(e) for e in self.session.execute(stmt).scalars()]

    def entries_for_date(
        self, day: date, user_id: UUID | None = None,
    ) -> list[TimeEntryInfo]:
        return self.list_entries(user_id=user_id, start=day, end=day)

    def entries_for_week(
        self, week_start: date, user_id: UUID | None = None,
    ) -> list[TimeEntryInfo]:
        return self.list_entries(
            user_id=user_id, start=week_start, end=week_end(week_start),
        )

    def entries_for_project(self, project_id: UUID) -> list[TimeEntryInfo]:
        return self.list_entries(project_id=project_id)

    def count_for_user(self, user_id: UUID) -> int:
        stmt = select(func.count()).select_from(TimeEntry).where(
            TimeEntry.user_id == user_id,
        )
        return self.session.execute(stmt).scalar_one()

    def count_for_project(self, project_id: UUID) -> int:
        stmt = select(func.count()).select_from(TimeEntry).where(
            TimeEntry.project_id == project_id,
        )
        return self.session.execute(stmt).scalar_one()
