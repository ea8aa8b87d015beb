"""
TimeEntryService -- hours logged against projects.

Responsibility:
    Adds, updates and deletes time entries, one at a time or as a whole
    weekly grid.  Every mutation is validated completely before anything
    is written, then passes the week lock in ``WeekStatusService``.

Architecture position:
    Kernel > Services -- imperative shell.

Invariants enforced:
    - hours > 0 for every stored entry; hours <= 0 never reaches the session.
    - The project belongs to the customer named on the entry.
    - New entries may not target an inactive customer or project.  Updates
      of existing entries may.
    - An entry's id and owner never change.
    - Both the old and the new week of a moved entry must be editable.

Failure modes:
    - ValidationError subclasses: bad or missing fields, nothing written.
    - LockedWeekError: the week's status forbids editing for the actor.
    - PermissionDeniedError: actor may not act on the owner's timesheet.
    - TimeEntryNotFoundError: update/delete of an unknown id.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from timesheet_kernel.domain.calendar import (
    in_week,
    iso_week_start,
    parse_iso_date,
    require_week_start,
)
from timesheet_kernel.domain.dtos import TimeEntryInfo, UserInfo, WeekRow
from timesheet_kernel.domain.validation import require_positive_hours, to_decimal
from timesheet_kernel.exceptions import (
    DateOutsideWeekError,
    InactiveCustomerError,
    InactiveProjectError,
    MissingFieldError,
    NoEntriesToSaveError,
    ProjectCustomerMismatchError,
    TimeEntryNotFoundError,
    UnknownReferenceError,
    ValidationError,
)
from timesheet_kernel.logging_config import get_logger
from timesheet_kernel.models import Customer, Project, TimeEntry, User
from timesheet_kernel.selectors.converters import entry_to_info
from timesheet_kernel.selectors.time_entry_selector import TimeEntrySelector
from timesheet_kernel.services.base import BaseService
from timesheet_kernel.services.week_status_service import (
    WeekStatusService,
    require_can_act_for,
)

logger = get_logger("services.time_entry")


@dataclass(frozen=True)
class _EntryFields:
    """Validated entry fields, ready to write."""

    entry_date: date
    customer_id: UUID
    project_id: UUID
    hours: Decimal
    description: str


class TimeEntryService(BaseService):
    """
    Writes time entries behind the week lock.

    Args:
        session: Caller-owned session.
        clock: Time source for ``created_at``.
        week_status_service: Shared lock service; built from the same
            session and clock when omitted.
    """

    def __init__(self, session, clock=None, week_status_service=None):
        super().__init__(session, clock)
        self._weeks = week_status_service or WeekStatusService(session, self._clock)
        self._selector = TimeEntrySelector(session)

    # -----------------------------------------------------------------
    # Validation
    # -----------------------------------------------------------------

    def _validate(
        self,
        entry_date: date | str,
        customer_id: UUID | None,
        project_id: UUID | None,
        hours,
        description: str | None,
        for_new: bool,
    ) -> _EntryFields:
        if not customer_id:
            raise MissingFieldError("TimeEntry", "customer")
        if not project_id:
            raise MissingFieldError("TimeEntry", "project")
        if entry_date is None:
            raise MissingFieldError("TimeEntry", "date")
        try:
            day = parse_iso_date(entry_date)
        except ValueError:
            raise ValidationError(f"Invalid entry date: {entry_date!r}") from None
        valid_hours = require_positive_hours(hours)

        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise UnknownReferenceError("customer", str(customer_id))
        project = self.session.get(Project, project_id)
        if project is None:
            raise UnknownReferenceError("project", str(project_id))
        if project.customer_id != customer_id:
            raise ProjectCustomerMismatchError(str(project_id), str(customer_id))
        if for_new and not customer.active:
            raise InactiveCustomerError(str(customer_id))
        if for_new and not project.active:
            raise InactiveProjectError(str(project_id))

        return _EntryFields(
            entry_date=day,
            customer_id=customer_id,
            project_id=project_id,
            hours=valid_hours,
            description=(description or "").strip(),
        )

    def _validate_logged(self, *args, **kwargs) -> _EntryFields:
        try:
            return self._validate(*args, **kwargs)
        except ValidationError as exc:
            logger.warning(
                "time_entry_rejected",
                extra={"reason": exc.code, "detail": str(exc)},
            )
            raise

    def _require_owner(self, owner_id: UUID) -> None:
        if self.session.get(User, owner_id) is None:
            raise UnknownReferenceError("user", str(owner_id))

    def _get_by_id(self, entry_id: UUID) -> TimeEntry:
        entry = self.session.get(TimeEntry, entry_id)
        if entry is None:
            raise TimeEntryNotFoundError(str(entry_id))
        return entry

    def _insert(self, actor: UserInfo, owner_id: UUID, fields: _EntryFields) -> TimeEntry:
        entry = TimeEntry(
            user_id=owner_id,
            entry_date=fields.entry_date,
            customer_id=fields.customer_id,
            project_id=fields.project_id,
            hours=fields.hours,
            description=fields.description,
            created_at=self._clock.now(),
            created_by_id=actor.id,
        )
        self.session.add(entry)
        return entry

    # -----------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------

    def get_time_entry(self, entry_id: UUID) -> TimeEntryInfo:
        return self._selector.get_entry(entry_id)

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def add_time_entry(
        self,
        actor: UserInfo,
        entry_date: date | str,
        customer_id: UUID,
        project_id: UUID,
        hours: Decimal | int | str,
        description: str = "",
        user_id: UUID | None = None,
    ) -> TimeEntryInfo:
        """
        Log hours for ``user_id`` (the actor when omitted).

        The owner's week gets a draft status record if it has none.

        Raises:
            PermissionDeniedError: If actor may not act for user_id.
            ValidationError: If any field is missing, unknown, inactive,
                mismatched, or hours <= 0.
            LockedWeekError: If the week is locked for the actor.
        """
        owner_id = user_id or actor.id
        require_can_act_for(actor, owner_id, "add time entries")
        fields = self._validate_logged(
            entry_date, customer_id, project_id, hours, description, for_new=True,
        )
        self._require_owner(owner_id)

        week_start = iso_week_start(fields.entry_date)
        self._weeks.require_editable(actor, owner_id, week_start)

        entry = self._insert(actor, owner_id, fields)
        self.session.flush()

        logger.info(
            "time_entry_added",
            extra={
                "entry_id": str(entry.id),
                "user_id": str(owner_id),
                "week_start": week_start.isoformat(),
                "hours": str(entry.hours),
            },
        )
        return entry_to_info(entry)

    def update_time_entry(self, actor: UserInfo, entry: TimeEntryInfo) -> TimeEntryInfo:
        """
        Replace an entry by id.

        Inactive customers and projects are accepted here so historical
        entries stay editable.

        Raises:
            TimeEntryNotFoundError: If the id is unknown.
            PermissionDeniedError: If actor may not act for the owner.
            ValidationError: On bad fields or an attempt to change the owner.
            LockedWeekError: If the old or the new week is locked.
        """
        existing = self._get_by_id(entry.id)
        require_can_act_for(actor, existing.user_id, "update time entries")
        if entry.user_id != existing.user_id:
            raise ValidationError("The owner of a time entry cannot change")
        fields = self._validate_logged(
            entry.entry_date,
            entry.customer_id,
            entry.project_id,
            entry.hours,
            entry.description,
            for_new=False,
        )

        old_week = iso_week_start(existing.entry_date)
        new_week = iso_week_start(fields.entry_date)
        self._weeks.require_editable(actor, existing.user_id, old_week)
        if new_week != old_week:
            self._weeks.require_editable(actor, existing.user_id, new_week)

        existing.entry_date = fields.entry_date
        existing.customer_id = fields.customer_id
        existing.project_id = fields.project_id
        existing.hours = fields.hours
        existing.description = fields.description
        existing.updated_by_id = actor.id
        self.session.flush()

        logger.info(
            "time_entry_updated",
            extra={
                "entry_id": str(existing.id),
                "user_id": str(existing.user_id),
                "week_start": new_week.isoformat(),
                "hours": str(existing.hours),
            },
        )
        return entry_to_info(existing)

    def delete_time_entry(self, actor: UserInfo, entry_id: UUID) -> None:
        """
        Remove an entry.

        Raises:
            TimeEntryNotFoundError: If the id is unknown.
            PermissionDeniedError: If actor may not act for the owner.
            LockedWeekError: If the entry's week is locked.
        """
        existing = self._get_by_id(entry_id)
        require_can_act_for(actor, existing.user_id, "delete time entries")
        week_start = iso_week_start(existing.entry_date)
        self._weeks.require_editable(actor, existing.user_id, week_start)

        self.session.delete(existing)
        self.session.flush()

        logger.info(
            "time_entry_deleted",
            extra={
                "entry_id": str(entry_id),
                "user_id": str(existing.user_id),
                "week_start": week_start.isoformat(),
            },
        )

    def save_week_rows(
        self,
        actor: UserInfo,
        week_start: date,
        rows: Iterable[WeekRow],
        user_id: UUID | None = None,
    ) -> list[TimeEntryInfo]:
        """
        Save a weekly grid as new entries, one per non-empty cell.

        Rows without a project and cells with hours <= 0 are skipped; NaN and
        infinite cells fail validation like any other bad value.
        Every remaining cell is validated before the first insert.

        Raises:
            NotWeekStartError: If week_start is not a Monday.
            PermissionDeniedError: If actor may not act for user_id.
            DateOutsideWeekError: If a cell is dated outside the week.
            NoEntriesToSaveError: If no cell is left to save.
            ValidationError: As for ``add_time_entry``.
            LockedWeekError: If the week is locked for the actor.
        """
        week_start = require_week_start(week_start)
        owner_id = user_id or actor.id
        require_can_act_for(actor, owner_id, "save the weekly timesheet")

        pending: list[_EntryFields] = []
        for row in rows:
            if not row.project_id:
                continue
            for day, raw_hours in row.hours.items():
                if raw_hours is None or raw_hours == "":
                    continue
                hours = to_decimal(raw_hours, "hours")
                if hours.is_finite() and hours <= 0:
                    continue
                day = parse_iso_date(day)
                if not in_week(day, week_start):
                    raise DateOutsideWeekError(day.isoformat(), week_start.isoformat())
                pending.append(
                    self._validate_logged(
                        day,
                        row.customer_id,
                        row.project_id,
                        raw_hours,
                        row.description,
                        for_new=True,
                    )
                )

        if not pending:
            raise NoEntriesToSaveError(week_start.isoformat())

        self._require_owner(owner_id)
        self._weeks.require_editable(actor, owner_id, week_start)

        entries = [self._insert(actor, owner_id, fields) for fields in pending]
        self.session.flush()

        logger.info(
            "week_rows_saved",
            extra={
                "user_id": str(owner_id),
                "week_start": week_start.isoformat(),
                "entry_count": len(entries),
            },
        )
        return [entry_to_info(e) for e in entries]
