"""
Module: timesheet_kernel.models.user
Responsibility: ORM persistence for the people who log time.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - name and email are NOT NULL (emptiness is rejected by UserService).
    - role is one of the Role values; daily_rate, when set, is >= 0
      (enforced by UserService).
"""

from decimal import Decimal

from sqlalchemy import Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from timesheet_kernel.db.base import TrackedBase


class User(TrackedBase):
    """A person who logs time and may act on timesheets."""

    __tablename__ = "users"

    __table_args__ = (
        Index("idx_user_email", "email"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    # "user" or "admin"
    role: Mapped[str] = mapped_column(String(10), nullable=False, default="user")

    # Currency per day, used for project cost actuals
    daily_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}: {self.role}>"
