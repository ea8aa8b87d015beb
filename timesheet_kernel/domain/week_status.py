"""
Week status state machine (``timesheet_kernel.domain.week_status``).

Responsibility
--------------
Pure rules for the weekly timesheet lifecycle: which status moves each
role may make, and whether a week's entries are editable by an actor.

Architecture position
---------------------
**Kernel domain layer** -- pure.  ZERO I/O.  May import only from
``domain/dtos``, ``domain/identity`` and ``exceptions``.

Invariants enforced
-------------------
* ``USER_TRANSITIONS`` / ``ADMIN_TRANSITIONS`` are the only role-gated
  moves.  There is no terminal state: approved and rejected weeks can be
  reopened by an admin.
* ``reopened`` is editable exactly like ``draft``.
* Admins may always edit, whatever the status.
* A week without a stored record is ``draft``.
"""

from __future__ import annotations

from enum import Enum

from timesheet_kernel.domain.dtos import Role, UserInfo, WeekStatus
from timesheet_kernel.domain.identity import can_manage_timesheets
from timesheet_kernel.exceptions import InvalidWeekTransitionError, ValidationError


# =========================================================================
# Transition tables
# =========================================================================


USER_TRANSITIONS: dict[WeekStatus, frozenset[WeekStatus]] = {
    WeekStatus.DRAFT: frozenset({WeekStatus.PENDING}),
    WeekStatus.PENDING: frozenset(),
    WeekStatus.APPROVED: frozenset(),
    WeekStatus.REJECTED: frozenset(),
    WeekStatus.REOPENED: frozenset({WeekStatus.PENDING}),
}

ADMIN_TRANSITIONS: dict[WeekStatus, frozenset[WeekStatus]] = {
    WeekStatus.DRAFT: frozenset({
        WeekStatus.PENDING,
        WeekStatus.APPROVED,
        WeekStatus.REJECTED,
    }),
    WeekStatus.PENDING: frozenset({
        WeekStatus.APPROVED,
        WeekStatus.REJECTED,
    }),
    WeekStatus.APPROVED: frozenset({WeekStatus.REOPENED}),
    WeekStatus.REJECTED: frozenset({WeekStatus.REOPENED}),
    WeekStatus.REOPENED: frozenset({
        WeekStatus.APPROVED,
        WeekStatus.REJECTED,
    }),
}

TRANSITIONS_BY_ROLE: dict[Role, dict[WeekStatus, frozenset[WeekStatus]]] = {
    Role.USER: USER_TRANSITIONS,
    Role.ADMIN: ADMIN_TRANSITIONS,
}

EDITABLE_STATUSES: frozenset[WeekStatus] = frozenset({
    WeekStatus.DRAFT,
    WeekStatus.REOPENED,
})

DEFAULT_WEEK_STATUS = WeekStatus.DRAFT


class WeekAction(str, Enum):
    """Named workflow actions and the status each one moves a week to."""

    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    REOPEN = "reopen"

    @property
    def target(self) -> WeekStatus:
        return _ACTION_TARGETS[self]


_ACTION_TARGETS: dict[WeekAction, WeekStatus] = {
    WeekAction.SUBMIT: WeekStatus.PENDING,
    WeekAction.APPROVE: WeekStatus.APPROVED,
    WeekAction.REJECT: WeekStatus.REJECTED,
    WeekAction.REOPEN: WeekStatus.REOPENED,
}


# =========================================================================
# Predicates
# =========================================================================


def parse_week_status(value: WeekStatus | str) -> WeekStatus:
    """Coerce a status name; unknown names are a ValidationError."""
    if isinstance(value, WeekStatus):
        return value
    try:
        return WeekStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown week status: {value!r}") from None


def effective_status(status: WeekStatus | None) -> WeekStatus:
    """Weeks without a record behave as draft."""
    return DEFAULT_WEEK_STATUS if status is None else status


def allowed_transitions(
    status: WeekStatus | None, actor: UserInfo,
) -> frozenset[WeekStatus]:
    """The statuses ``actor`` may move a week in ``status`` to."""
    table = TRANSITIONS_BY_ROLE[actor.role]
    return table[effective_status(status)]


def is_transition_allowed(
    status: WeekStatus | None, target: WeekStatus, actor: UserInfo,
) -> bool:
    return target in allowed_transitions(status, actor)


def can_edit_timesheet(status: WeekStatus | None, actor: UserInfo) -> bool:
    """
    The single gate for every time entry mutation.

    Admins may always edit.  Everyone else only while the week is
    draft (including no record) or reopened.
    """
    if can_manage_timesheets(actor):
        return True
    return effective_status(status) in EDITABLE_STATUSES


def require_transition(
    week_start: str,
    status: WeekStatus | None,
    target: WeekStatus,
    actor: UserInfo,
) -> None:
    """Raise InvalidWeekTransitionError unless the table allows the move."""
    current = effective_status(status)
    if not is_transition_allowed(current, target, actor):
        raise InvalidWeekTransitionError(
            week_start=week_start,
            from_status=current.value,
            to_status=target.value,
            role=actor.role.value,
        )
