"""
Module: timesheet_kernel.selectors.catalog_selector
Responsibility: Read-only queries over customers and projects, including the
    id -> name lookups the aggregation engine labels its groups with.
Architecture position: Kernel > Selectors.
"""

from uuid import UUID

from sqlalchemy import select

from timesheet_kernel.domain.dtos import CustomerInfo, ProjectInfo
from timesheet_kernel.exceptions import CustomerNotFoundError, ProjectNotFoundError
from timesheet_kernel.models import Customer, Project
from timesheet_kernel.selectors.base import BaseSelector
from timesheet_kernel.selectors.converters import customer_to_info, project_to_info


class CatalogSelector(BaseSelector):
    """Customers and projects, as DTOs."""

    def find_customer(self, customer_id: UUID | None) -> CustomerInfo | None:
        if customer_id is None:
            return None
        customer = self.session.get(Customer, customer_id)
        return customer_to_info(customer) if customer else None

    def get_customer(self, customer_id: UUID) -> CustomerInfo:
        info = self.find_customer(customer_id)
        if info is None:
            raise CustomerNotFoundError(str(customer_id))
        return info

    def list_customers(self, active_only: bool = False) -> list[CustomerInfo]:
        stmt = select(Customer)
        if active_only:
            stmt = stmt.where(Customer.active.is_(True))
        stmt = stmt.order_by(Customer.name, Customer.id)
        return [customer_to_info(c) for c in self.session.execute(stmt).scalars()]

    def find_project(self, project_id: UUID | None) -> ProjectInfo | None:
        if project_id is None:
            return None
        project = self.session.get(Project, project_id)
        return project_to_info(project) if project else None

    def get_project(self, project_id: UUID) -> ProjectInfo:
        info = self.find_project(project_id)
        if info is None:
            raise ProjectNotFoundError(str(project_id))
        return info

    def list_projects(
        self,
        active_only: bool = False,
        customer_id: UUID | None = None,
    ) -> list[ProjectInfo]:
        stmt = select(Project)
        if active_only:
            stmt = stmt.where(Project.active.is_(True))
        if customer_id is not None:
            stmt = stmt.where(Project.customer_id == customer_id)
        stmt = stmt.order_by(Project.name, Project.id)
        return [project_to_info(p) for p in self.session.execute(stmt).scalars()]

    def projects_by_customer(self, customer_id: UUID) -> list[ProjectInfo]:
        """Active projects of one customer (what a new entry may be booked on)."""
        return self.list_projects(active_only=True, customer_id=customer_id)

    def customer_names(self) -> dict[UUID, str]:
        rows = self.session.execute(select(Customer.id, Customer.name))
        return {row.id: row.name for row in rows}

    def project_names(self) -> dict[UUID, str]:
        rows = self.session.execute(select(Project.id, Project.name))
        return {row.id: row.name for row in rows}
