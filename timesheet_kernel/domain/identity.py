"""
Identity and role predicates (``timesheet_kernel.domain.identity``).

Every authorization decision in the kernel derives from
``can_manage_timesheets``.  There are no per-resource ACLs.
"""

from __future__ import annotations

from uuid import UUID

from timesheet_kernel.domain.dtos import Role, UserInfo
from timesheet_kernel.exceptions import InvalidRoleError


def parse_role(value: Role | str) -> Role:
    """Coerce a role name to ``Role``; raises InvalidRoleError on unknown names."""
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise InvalidRoleError(str(value)) from None


def can_manage_timesheets(user: UserInfo) -> bool:
    """True iff the user is an admin."""
    return user.role == Role.ADMIN


def can_act_for(actor: UserInfo, owner_id: UUID) -> bool:
    """An actor may work on their own timesheet, or anyone's if they manage timesheets."""
    return actor.id == owner_id or can_manage_timesheets(actor)
