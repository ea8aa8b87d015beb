"""
Data Transfer Objects for the timesheet domain.

Responsibility:
    Immutable value objects passed between the pure domain layer, the
    services and the selectors.  Services return these, never ORM rows.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class Role(str, Enum):
    """The two roles of the system. There is no hierarchy beyond them."""

    USER = "user"
    ADMIN = "admin"


class WeekStatus(str, Enum):
    """Approval status of one user's week."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REOPENED = "reopened"


@dataclass(frozen=True)
class UserInfo:
    """A person who logs time, and the acting principal for role checks."""

    id: UUID
    name: str
    email: str
    role: Role = Role.USER
    daily_rate: Decimal | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class CustomerInfo:
    """Customer catalog entry."""

    id: UUID
    name: str
    contact_person: str = ""
    email: str = ""
    active: bool = True


@dataclass(frozen=True)
class ProjectInfo:
    """Project catalog entry, owned by exactly one customer."""

    id: UUID
    name: str
    customer_id: UUID
    description: str = ""
    active: bool = True
    budget_days: Decimal | None = None
    budget_cost: Decimal | None = None


@dataclass(frozen=True)
class TimeEntryInfo:
    """
    Hours logged by one user on one day against one project.

    Contract:
        ``id`` and ``user_id`` never change.  ``hours`` is always > 0.
    """

    id: UUID
    user_id: UUID
    entry_date: date
    customer_id: UUID
    project_id: UUID
    hours: Decimal
    description: str = ""


@dataclass(frozen=True)
class WeekStatusInfo:
    """The stored status of one (user, week start) pair."""

    id: UUID
    user_id: UUID
    week_start: date
    status: WeekStatus
    version: int = 1
    changed_at: datetime | None = None
    changed_by_id: UUID | None = None


@dataclass(frozen=True)
class WeekRow:
    """
    One row of the weekly direct-entry grid.

    ``hours`` maps each day of the week to the hours typed in that cell;
    empty and non-positive cells are skipped when the grid is saved.
    """

    customer_id: UUID | None
    project_id: UUID | None
    description: str = ""
    hours: Mapping[date, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectActuals:
    """Logged effort on a project compared with its budget."""

    project_id: UUID
    hours: Decimal
    days: Decimal
    cost: Decimal
    budget_days: Decimal | None = None
    budget_cost: Decimal | None = None
    utilization_percent: int | None = None
    cost_utilization_percent: int | None = None
    remaining_days: Decimal | None = None
    remaining_cost: Decimal | None = None

    @property
    def has_days_budget(self) -> bool:
        return self.utilization_percent is not None

    @property
    def has_cost_budget(self) -> bool:
        return self.cost_utilization_percent is not None
