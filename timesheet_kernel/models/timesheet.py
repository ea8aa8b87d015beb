"""
Module: timesheet_kernel.models.timesheet
Responsibility: ORM persistence for time entries and the per-week status
    record that locks them.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - hours > 0 for every stored entry (rejected earlier by TimeEntryService).
    - Exactly one WeekStatusRecord per (user_id, week_start)
      (uq_week_status_user_week).  Records are never deleted.
    - WeekStatusRecord.version is the optimistic version stamp of the week's
      lock domain: SQLAlchemy bumps it on every UPDATE and raises
      StaleDataError when another transaction got there first.

Failure modes:
    - IntegrityError on a second record for the same (user, week).
    - StaleDataError on a concurrent status change (surfaced by the service
      as OptimisticLockError).
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Date,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from timesheet_kernel.db.base import TrackedBase, UTCDateTime, UUIDString


class TimeEntry(TrackedBase):
    """Hours one user logged on one day against one project."""

    __tablename__ = "time_entries"

    __table_args__ = (
        Index("idx_entry_user_date", "user_id", "entry_date"),
        Index("idx_entry_project", "project_id"),
        Index("idx_entry_customer", "customer_id"),
    )

    # Owner of the entry; never changes
    user_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    entry_date: Mapped[date] = mapped_column(Date, nullable=False)

    customer_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    project_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)

    description: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<TimeEntry {self.entry_date} {self.hours}h>"


class WeekStatusRecord(TrackedBase):
    """Approval status of one user's ISO week."""

    __tablename__ = "week_statuses"

    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_week_status_user_week"),
        Index("idx_week_status_week", "week_start"),
    )

    user_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    # Monday of the ISO week
    week_start: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    changed_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime(),
        nullable=True,
    )

    changed_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<WeekStatusRecord {self.user_id} {self.week_start}: {self.status}>"
