"""
Module: timesheet_kernel.selectors.week_status_selector
Responsibility: Read-only queries over stored week statuses.  A week with no
    stored record reads as draft through ``status_of``.
Architecture position: Kernel > Selectors.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select

from timesheet_kernel.domain.dtos import WeekStatus, WeekStatusInfo
from timesheet_kernel.domain.week_status import effective_status
from timesheet_kernel.models import WeekStatusRecord
from timesheet_kernel.selectors.base import BaseSelector
from timesheet_kernel.selectors.converters import week_status_to_info


class WeekStatusSelector(BaseSelector):

    def find(self, user_id: UUID, week_start: date) -> WeekStatusInfo | None:
        record = self.session.execute(
            select(WeekStatusRecord).where(
                WeekStatusRecord.user_id == user_id,
                WeekStatusRecord.week_start == week_start,
            )
        ).scalar_one_or_none()
        return week_status_to_info(record) if record else None

    def status_of(self, user_id: UUID, week_start: date) -> WeekStatus:
        info = self.find(user_id, week_start)
        return effective_status(info.status if info else None)

    def list_for_week(self, week_start: date) -> list[WeekStatusInfo]:
        stmt = (
            select(WeekStatusRecord)
            .where(WeekStatusRecord.week_start == week_start)
            .order_by(WeekStatusRecord.user_id)
        )
        return [week_status_to_info(r) for r in self.session.execute(stmt).scalars()]

    def list_all(self) -> list[WeekStatusInfo]:
        stmt = select(WeekStatusRecord).order_by(
            WeekStatusRecord.week_start, WeekStatusRecord.user_id,
        )
        return [week_status_to_info(r) for r in self.session.execute(stmt).scalars()]
