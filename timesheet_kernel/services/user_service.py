"""
Service layer for users.

Manages the people who log time: their role and their daily rate.
Returns ``UserInfo`` DTOs, never ORM rows.

Invariants enforced:
    - name and email are required; email must contain ``@``.
    - role is a valid ``Role``; daily_rate, when set, is >= 0.
    - A user that still owns time entries cannot be deleted.
"""

from decimal import Decimal
from uuid import UUID

from timesheet_kernel.domain.dtos import Role, UserInfo
from timesheet_kernel.domain.identity import parse_role
from timesheet_kernel.domain.validation import (
    require_daily_rate,
    require_email,
    require_text,
)
from timesheet_kernel.exceptions import UserNotFoundError, UserReferencedError
from timesheet_kernel.logging_config import get_logger
from timesheet_kernel.models import User
from timesheet_kernel.selectors.converters import user_to_info
from timesheet_kernel.selectors.time_entry_selector import TimeEntrySelector
from timesheet_kernel.selectors.user_selector import UserSelector
from timesheet_kernel.services.base import BaseService

logger = get_logger("services.user")


class UserService(BaseService):
    """CRUD for users."""

    def _get_by_id(self, user_id: UUID) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    def get_user(self, user_id: UUID) -> UserInfo:
        return user_to_info(self._get_by_id(user_id))

    def list_users(self) -> list[UserInfo]:
        return UserSelector(self.session).list_users()

    def add_user(
        self,
        name: str,
        email: str,
        actor_id: UUID,
        role: Role | str = Role.USER,
        daily_rate: Decimal | int | str | None = None,
        user_id: UUID | None = None,
    ) -> UserInfo:
        """
        Create a user.

        Args:
            name: Display name.
            email: Contact address; must contain ``@``.
            actor_id: Who is creating the user.
            role: ``user`` (default) or ``admin``.
            daily_rate: Optional currency amount per working day.
            user_id: Explicit id, used when seeding from a snapshot.

        Raises:
            MissingFieldError: If name or email is blank.
            InvalidEmailError: If email has no ``@``.
            InvalidRoleError: If role is unknown.
            InvalidRateError: If daily_rate is negative.
        """
        user = User(
            name=require_text("User", "name", name),
            email=require_email("User", email),
            role=parse_role(role).value,
            daily_rate=require_daily_rate(daily_rate),
            created_by_id=actor_id,
        )
        if user_id is not None:
            user.id = user_id

        self.session.add(user)
        self.session.flush()

        logger.info(
            "user_added",
            extra={"user_id": str(user.id), "role": user.role},
        )
        return user_to_info(user)

    def update_user(self, info: UserInfo, actor_id: UUID) -> UserInfo:
        """
        Replace a user's name, email, role and rate.

        Raises:
            UserNotFoundError: If ``info.id`` is unknown.
            ValidationError: As for ``add_user``.
        """
        user = self._get_by_id(info.id)
        user.name = require_text("User", "name", info.name)
        user.email = require_email("User", info.email)
        user.role = parse_role(info.role).value
        user.daily_rate = require_daily_rate(info.daily_rate)
        user.updated_by_id = actor_id
        self.session.flush()

        logger.info("user_updated", extra={"user_id": str(user.id)})
        return user_to_info(user)

    def delete_user(self, user_id: UUID, actor_id: UUID) -> None:
        """
        Remove a user who owns no time entries.

        Raises:
            UserNotFoundError: If the user doesn't exist.
            UserReferencedError: If entries still reference the user.
        """
        user = self._get_by_id(user_id)
        entry_count = TimeEntrySelector(self.session).count_for_user(user_id)
        if entry_count:
            logger.warning(
                "user_delete_rejected",
                extra={"user_id": str(user_id), "entry_count": entry_count},
            )
            raise UserReferencedError(str(user_id), entry_count)

        self.session.delete(user)
        self.session.flush()

        logger.info(
            "user_deleted",
            extra={"user_id": str(user_id), "actor_id": str(actor_id)},
        )
