"""
Module: timesheet_kernel.models.catalog
Responsibility: ORM persistence for customers and their projects.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - A project's customer_id referenced an existing customer when it was
      written (checked by CatalogService, not by a foreign key: deleting a
      customer does not cascade and may leave dangling references).
    - Inactive rows stay queryable so historical entries keep resolving.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from timesheet_kernel.db.base import TrackedBase, UUIDString


class Customer(TrackedBase):
    """A client whose projects time is booked against."""

    __tablename__ = "customers"

    __table_args__ = (
        Index("idx_customer_active", "active"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    contact_person: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Customer {self.name}>"


class Project(TrackedBase):
    """A piece of work for one customer, optionally budgeted in days and cost."""

    __tablename__ = "projects"

    __table_args__ = (
        Index("idx_project_customer", "customer_id"),
        Index("idx_project_active", "active"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    customer_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    description: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    budget_days: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    budget_cost: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)

    def __repr__(self) -> str:
        return f"<Project {self.name}>"
