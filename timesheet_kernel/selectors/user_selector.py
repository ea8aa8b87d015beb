"""
Module: timesheet_kernel.selectors.user_selector
Responsibility: Read-only queries over users and their daily rates.
Architecture position: Kernel > Selectors.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from timesheet_kernel.domain.dtos import UserInfo
from timesheet_kernel.exceptions import UserNotFoundError
from timesheet_kernel.models import User
from timesheet_kernel.selectors.base import BaseSelector
from timesheet_kernel.selectors.converters import user_to_info


class UserSelector(BaseSelector):

    def find_user(self, user_id: UUID | None) -> UserInfo | None:
        if user_id is None:
            return None
        user = self.session.get(User, user_id)
        return user_to_info(user) if user else None

    def get_user(self, user_id: UUID) -> UserInfo:
        info = self.find_user(user_id)
        if info is None:
            raise UserNotFoundError(str(user_id))
        return info

    def list_users(self) -> list[UserInfo]:
        stmt = select(User).order_by(User.name, User.id)
        return [user_to_info(u) for u in self.session.execute(stmt).scalars()]

    def rates_by_user(self) -> dict[UUID, Decimal | None]:
        rows = self.session.execute(select(User.id, User.daily_rate))
        return {row.id: row.daily_rate for row in rows}
