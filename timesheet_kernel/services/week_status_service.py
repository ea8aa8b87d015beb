"""
WeekStatusService -- the weekly approval lock.

Responsibility:
    Owns the persisted status of each user's ISO week and the editability
    gate every time entry mutation goes through.  The pure rules live in
    ``timesheet_kernel.domain.week_status``; this service loads and locks
    the record, applies them, and writes the result.

Architecture position:
    Kernel > Services -- imperative shell.

Invariants enforced:
    - ``week_start`` is always an ISO Monday.
    - One record per (user_id, week_start); records are never deleted.
    - Re-applying the current status writes nothing and does not bump
      the record's version.
    - Named actions (submit/approve/reject/reopen) always follow the
      transition table.  ``update_week_status`` follows it only when the
      service is built with ``enforce_transitions=True``.
    - The week record is read FOR UPDATE before any change, and its
      ``version`` column turns a lost race into OptimisticLockError.

Failure modes:
    - NotWeekStartError: week_start is not a Monday.
    - PermissionDeniedError: actor may not act on the owner's timesheet.
    - InvalidWeekTransitionError: move not allowed for the actor's role.
    - LockedWeekError: ``require_editable`` on a locked week.
    - OptimisticLockError: concurrent change to the same week record.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm.exc import StaleDataError

from timesheet_kernel.domain.calendar import require_week_start
from timesheet_kernel.domain.dtos import UserInfo, WeekStatus, WeekStatusInfo
from timesheet_kernel.domain.identity import can_act_for
from timesheet_kernel.domain.week_status import (
    DEFAULT_WEEK_STATUS,
    WeekAction,
    can_edit_timesheet,
    parse_week_status,
    require_transition,
)
from timesheet_kernel.exceptions import (
    InvalidWeekTransitionError,
    LockedWeekError,
    OptimisticLockError,
    PermissionDeniedError,
)
from timesheet_kernel.logging_config import get_logger
from timesheet_kernel.models import WeekStatusRecord
from timesheet_kernel.selectors.converters import week_status_to_info
from timesheet_kernel.selectors.week_status_selector import WeekStatusSelector
from timesheet_kernel.services.base import BaseService

logger = get_logger("services.week_status")


def require_can_act_for(actor: UserInfo, owner_id: UUID, action: str) -> None:
    if not can_act_for(actor, owner_id):
        logger.warning(
            "permission_denied",
            extra={
                "actor_id": str(actor.id),
                "owner_id": str(owner_id),
                "action": action,
            },
        )
        raise PermissionDeniedError(str(actor.id), action, str(owner_id))


class WeekStatusService(BaseService):
    """
    Reads, transitions and locks week status records.

    Args:
        session: Caller-owned session.
        clock: Time source for ``changed_at``.
        enforce_transitions: Make ``update_week_status`` follow the
            transition table as the named actions do.
    """

    def __init__(self, session, clock=None, enforce_transitions: bool = False):
        super().__init__(session, clock)
        self.enforce_transitions = enforce_transitions
        self._selector = WeekStatusSelector(session)

    # -----------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------

    def get_week_status(self, user_id: UUID, week_start: date) -> WeekStatusInfo | None:
        """The stored record, or None for an implicit draft week."""
        return self._selector.find(user_id, require_week_start(week_start))

    def status_of(self, user_id: UUID, week_start: date) -> WeekStatus:
        return self._selector.status_of(user_id, require_week_start(week_start))

    # -----------------------------------------------------------------
    # Locking
    # -----------------------------------------------------------------

    def _lock_record(self, user_id: UUID, week_start: date) -> WeekStatusRecord | None:
        return self.session.execute(
            select(WeekStatusRecord)
            .where(
                WeekStatusRecord.user_id == user_id,
                WeekStatusRecord.week_start == week_start,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def _flush(self, record: WeekStatusRecord) -> None:
        try:
            self.session.flush()
        except StaleDataError as exc:
            logger.warning(
                "week_status_conflict",
                extra={
                    "user_id": str(record.user_id),
                    "week_start": record.week_start.isoformat(),
                },
            )
            raise OptimisticLockError(
                "WeekStatus", f"{record.user_id}/{record.week_start.isoformat()}",
            ) from exc

    def _create(
        self, user_id: UUID, week_start: date, status: WeekStatus, actor_id: UUID,
    ) -> WeekStatusRecord:
        record = WeekStatusRecord(
            user_id=user_id,
            week_start=week_start,
            status=status.value,
            changed_at=self._clock.now(),
            changed_by_id=actor_id,
            created_by_id=actor_id,
        )
        self.session.add(record)
        self._flush(record)
        return record

    def ensure_week(
        self, actor: UserInfo, user_id: UUID, week_start: date,
    ) -> WeekStatusInfo:
        """Lock the week's record, creating it as draft when missing."""
        week_start = require_week_start(week_start)
        record = self._lock_record(user_id, week_start)
        if record is None:
            record = self._create(user_id, week_start, DEFAULT_WEEK_STATUS, actor.id)
            logger.info(
                "week_status_created",
                extra={
                    "user_id": str(user_id),
                    "week_start": week_start.isoformat(),
                    "status": record.status,
                },
            )
        return week_status_to_info(record)

    def require_editable(
        self, actor: UserInfo, user_id: UUID, week_start: date,
    ) -> WeekStatus:
        """
        The gate consulted by every time entry mutation.

        Creates the draft record for a week seen for the first time.

        Raises:
            LockedWeekError: If ``actor`` may not edit the week.
        """
        status = self.ensure_week(actor, user_id, week_start).status
        if not can_edit_timesheet(status, actor):
            logger.warning(
                "timesheet_locked",
                extra={
                    "actor_id": str(actor.id),
                    "user_id": str(user_id),
                    "week_start": week_start.isoformat(),
                    "status": status.value,
                },
            )
            raise LockedWeekError(str(user_id), week_start.isoformat(), status.value)
        return status

    # -----------------------------------------------------------------
    # Transitions
    # -----------------------------------------------------------------

    def _apply(
        self,
        actor: UserInfo,
        user_id: UUID,
        week_start: date,
        target: WeekStatus,
        enforce: bool,
        strict: bool = False,
    ) -> WeekStatusInfo:
        week_start = require_week_start(week_start)
        require_can_act_for(actor, user_id, f"set week status to {target.value}")

        record = self._lock_record(user_id, week_start)
        current = WeekStatus(record.status) if record is not None else None
        unchanged = (current or DEFAULT_WEEK_STATUS) == target

        # An upsert of the current status skips the table; named actions don't
        if strict or (enforce and not unchanged):
            try:
                require_transition(week_start.isoformat(), current, target, actor)
            except InvalidWeekTransitionError:
                logger.warning(
                    "week_transition_rejected",
                    extra={
                        "user_id": str(user_id),
                        "week_start": week_start.isoformat(),
                        "from_status": (current or DEFAULT_WEEK_STATUS).value,
                        "to_status": target.value,
                    },
                )
                raise

        if record is None:
            record = self._create(user_id, week_start, target, actor.id)
        elif current == target:
            return week_status_to_info(record)
        else:
            record.status = target.value
            record.changed_at = self._clock.now()
            record.changed_by_id = actor.id
            record.updated_by_id = actor.id
            self._flush(record)

        logger.info(
            "week_status_changed",
            extra={
                "actor_id": str(actor.id),
                "user_id": str(user_id),
                "week_start": week_start.isoformat(),
                "from_status": current.value if current else None,
                "to_status": target.value,
            },
        )
        return week_status_to_info(record)

    def update_week_status(
        self,
        actor: UserInfo,
        user_id: UUID,
        week_start: date,
        status: WeekStatus | str,
    ) -> WeekStatusInfo:
        """
        Upsert the status of one user's week.

        A missing record is created directly in ``status``.  Unless the
        service enforces transitions, any status may follow any other.
        Setting the status a week already has is a no-op.

        Raises:
            NotWeekStartError: If week_start is not a Monday.
            PermissionDeniedError: If actor may not act for user_id.
            InvalidWeekTransitionError: Only with ``enforce_transitions``.
        """
        target = parse_week_status(status)
        return self._apply(actor, user_id, week_start, target, self.enforce_transitions)

    def perform(
        self,
        actor: UserInfo,
        user_id: UUID,
        week_start: date,
        action: WeekAction | str,
    ) -> WeekStatusInfo:
        """Run a named workflow action; the transition table always applies."""
        return self._apply(
            actor, user_id, week_start, WeekAction(action).target,
            enforce=True, strict=True,
        )

    def submit(self, actor: UserInfo, user_id: UUID, week_start: date) -> WeekStatusInfo:
        return self.perform(actor, user_id, week_start, WeekAction.SUBMIT)

    def approve(self, actor: UserInfo, user_id: UUID, week_start: date) -> WeekStatusInfo:
        return self.perform(actor, user_id, week_start, WeekAction.APPROVE)

    def reject(self, actor: UserInfo, user_id: UUID, week_start: date) -> WeekStatusInfo:
        return self.perform(actor, user_id, week_start, WeekAction.REJECT)

    def reopen(self, actor: UserInfo, user_id: UUID, week_start: date) -> WeekStatusInfo:
        return self.perform(actor, user_id, week_start, WeekAction.REOPEN)
