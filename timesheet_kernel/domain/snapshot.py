"""
Store snapshots (``timesheet_kernel.domain.snapshot``).

Responsibility
--------------
A ``StoreSnapshot`` is the whole content of a store at one moment as
plain DTOs.  ``to_dict()`` renders it to the seed format (strings, lists
and dicts only, so it can be dumped to YAML or JSON) and
``snapshot_from_dict()`` parses that format back.

Seed format
-----------
Five optional top-level lists: ``users``, ``customers``, ``projects``,
``week_statuses`` and ``time_entries``.  Ids are UUID strings and may be
omitted for rows nothing else refers to; dates are ISO strings; hours,
rates and budgets are decimal strings or numbers.

Architecture position
---------------------
**Kernel domain layer** -- pure.  ZERO I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from timesheet_kernel.domain.calendar import parse_iso_date
from timesheet_kernel.domain.dtos import (
    CustomerInfo,
    ProjectInfo,
    TimeEntryInfo,
    UserInfo,
    WeekStatusInfo,
)
from timesheet_kernel.domain.identity import parse_role
from timesheet_kernel.domain.validation import (
    require_budget,
    require_daily_rate,
    require_positive_hours,
)
from timesheet_kernel.domain.week_status import parse_week_status
from timesheet_kernel.exceptions import MissingFieldError, ValidationError

SECTIONS = ("users", "customers", "projects", "week_statuses", "time_entries")


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable copy of every row in a store."""

    users: tuple[UserInfo, ...] = ()
    customers: tuple[CustomerInfo, ...] = ()
    projects: tuple[ProjectInfo, ...] = ()
    week_statuses: tuple[WeekStatusInfo, ...] = ()
    time_entries: tuple[TimeEntryInfo, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in SECTIONS)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "users": [
                {
                    "id": str(u.id),
                    "name": u.name,
                    "email": u.email,
                    "role": u.role.value,
                    "daily_rate": _dec(u.daily_rate),
                }
                for u in self.users
            ],
            "customers": [
                {
                    "id": str(c.id),
                    "name": c.name,
                    "contact_person": c.contact_person,
                    "email": c.email,
                    "active": c.active,
                }
                for c in self.customers
            ],
            "projects": [
                {
                    "id": str(p.id),
                    "name": p.name,
                    "customer_id": str(p.customer_id),
                    "description": p.description,
                    "active": p.active,
                    "budget_days": _dec(p.budget_days),
                    "budget_cost": _dec(p.budget_cost),
                }
                for p in self.projects
            ],
            "week_statuses": [
                {
                    "user_id": str(w.user_id),
                    "week_start": w.week_start.isoformat(),
                    "status": w.status.value,
                }
                for w in self.week_statuses
            ],
            "time_entries": [
                {
                    "id": str(e.id),
                    "user_id": str(e.user_id),
                    "date": e.entry_date.isoformat(),
                    "customer_id": str(e.customer_id),
                    "project_id": str(e.project_id),
                    "hours": _dec(e.hours),
                    "description": e.description,
                }
                for e in self.time_entries
            ],
        }


def _dec(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _uuid(value: Any, field_name: str, required: bool = False) -> UUID:
    if value is None or value == "":
        if required:
            raise MissingFieldError("seed row", field_name)
        return uuid4()
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} is not a UUID: {value!r}") from None


def _date(value: Any, field_name: str) -> date:
    if value is None:
        raise MissingFieldError("seed row", field_name)
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not an ISO date: {value!r}") from None


def _rows(data: Mapping[str, Any], section: str) -> list[Mapping[str, Any]]:
    rows = data.get(section) or []
    if not isinstance(rows, list):
        raise ValidationError(f"Seed section {section!r} must be a list")
    return rows


def snapshot_from_dict(data: Mapping[str, Any] | None) -> StoreSnapshot:
    """
    Parse the seed format into a ``StoreSnapshot``.

    Unknown top-level keys are rejected.  Field values get the same
    checks the services apply (roles, rates, budgets, positive hours);
    references between rows are not resolved here.

    Raises:
        ValidationError: On any malformed row.
    """
    data = data or {}
    unknown = set(data) - set(SECTIONS)
    if unknown:
        raise ValidationError(f"Unknown seed sections: {sorted(unknown)}")

    users = tuple(
        UserInfo(
            id=_uuid(row.get("id"), "id"),
            name=row.get("name", ""),
            email=row.get("email", ""),
            role=parse_role(row.get("role", "user")),
            daily_rate=require_daily_rate(row.get("daily_rate")),
        )
        for row in _rows(data, "users")
    )
    customers = tuple(
        CustomerInfo(
            id=_uuid(row.get("id"), "id"),
            name=row.get("name", ""),
            contact_person=row.get("contact_person") or "",
            email=row.get("email") or "",
            active=bool(row.get("active", True)),
        )
        for row in _rows(data, "customers")
    )
    projects = tuple(
        ProjectInfo(
            id=_uuid(row.get("id"), "id"),
            name=row.get("name", ""),
            customer_id=_uuid(row.get("customer_id"), "customer_id", required=True),
            description=row.get("description") or "",
            active=bool(row.get("active", True)),
            budget_days=require_budget("budget_days", row.get("budget_days")),
            budget_cost=require_budget("budget_cost", row.get("budget_cost")),
        )
        for row in _rows(data, "projects")
    )
    week_statuses = tuple(
        WeekStatusInfo(
            id=uuid4(),
            user_id=_uuid(row.get("user_id"), "user_id", required=True),
            week_start=_date(row.get("week_start"), "week_start"),
            status=parse_week_status(row.get("status", "draft")),
        )
        for row in _rows(data, "week_statuses")
    )
    time_entries = tuple(
        TimeEntryInfo(
            id=_uuid(row.get("id"), "id"),
            user_id=_uuid(row.get("user_id"), "user_id", required=True),
            entry_date=_date(row.get("date"), "date"),
            customer_id=_uuid(row.get("customer_id"), "customer_id", required=True),
            project_id=_uuid(row.get("project_id"), "project_id", required=True),
            hours=require_positive_hours(row.get("hours")),
            description=row.get("description") or "",
        )
        for row in _rows(data, "time_entries")
    )
    return StoreSnapshot(
        users=users,
        customers=customers,
        projects=projects,
        week_statuses=week_statuses,
        time_entries=time_entries,
    )
