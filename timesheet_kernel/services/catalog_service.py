"""
Service layer for the customer/project catalog.

Manages the customers time is billed to and the projects under them.
Returns ``CustomerInfo`` / ``ProjectInfo`` DTOs instead of ORM rows.

Invariants enforced:
    - Names are required.
    - A project's customer must exist.  Once entries are booked on a
      project, its customer can no longer change.
    - Budgets, when set, are >= 0.
    - Deletes are unconditional.  Entries pointing at a deleted row keep
      their ids and report under "Unknown".
"""

from decimal import Decimal
from uuid import UUID

from timesheet_kernel.domain.dtos import CustomerInfo, ProjectInfo
from timesheet_kernel.domain.validation import require_budget, require_text
from timesheet_kernel.exceptions import (
    CustomerNotFoundError,
    ProjectCustomerLockedError,
    ProjectNotFoundError,
    UnknownReferenceError,
)
from timesheet_kernel.logging_config import get_logger
from timesheet_kernel.models import Customer, Project
from timesheet_kernel.selectors.catalog_selector import CatalogSelector
from timesheet_kernel.selectors.converters import customer_to_info, project_to_info
from timesheet_kernel.selectors.time_entry_selector import TimeEntrySelector
from timesheet_kernel.services.base import BaseService

logger = get_logger("services.catalog")


class CatalogService(BaseService):
    """
    Service for managing customers and projects.

    All public methods return DTOs.  Reads delegate to ``CatalogSelector``.
    """

    def __init__(self, session, clock=None):
        super().__init__(session, clock)
        self._selector = CatalogSelector(session)

    # -----------------------------------------------------------------
    # Customers
    # -----------------------------------------------------------------

    def _get_customer(self, customer_id: UUID) -> Customer:
        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))
        return customer

    def get_customer(self, customer_id: UUID) -> CustomerInfo:
        return customer_to_info(self._get_customer(customer_id))

    def list_customers(self, active_only: bool = False) -> list[CustomerInfo]:
        return self._selector.list_customers(active_only=active_only)

    def add_customer(
        self,
        name: str,
        actor_id: UUID,
        contact_person: str = "",
        email: str = "",
        active: bool = True,
        customer_id: UUID | None = None,
    ) -> CustomerInfo:
        """
        Create a customer.

        Raises:
            MissingFieldError: If name is blank.
        """
        customer = Customer(
            name=require_text("Customer", "name", name),
            contact_person=(contact_person or "").strip(),
            email=(email or "").strip(),
            active=bool(active),
            created_by_id=actor_id,
        )
        if customer_id is not None:
            customer.id = customer_id

        self.session.add(customer)
        self.session.flush()

        logger.info(
            "customer_added",
            extra={"customer_id": str(customer.id), "customer_name": customer.name},
        )
        return customer_to_info(customer)

    def update_customer(self, info: CustomerInfo, actor_id: UUID) -> CustomerInfo:
        """
        Replace a customer's fields.

        Raises:
            CustomerNotFoundError: If ``info.id`` is unknown.
            MissingFieldError: If name is blank.
        """
        customer = self._get_customer(info.id)
        customer.name = require_text("Customer", "name", info.name)
        customer.contact_person = (info.contact_person or "").strip()
        customer.email = (info.email or "").strip()
        customer.active = bool(info.active)
        customer.updated_by_id = actor_id
        self.session.flush()

        logger.info(
            "customer_updated",
            extra={"customer_id": str(customer.id), "active": customer.active},
        )
        return customer_to_info(customer)

    def delete_customer(self, customer_id: UUID, actor_id: UUID) -> None:
        """
        Remove a customer.  Its projects and entries are left in place.

        Raises:
            CustomerNotFoundError: If the customer doesn't exist.
        """
        customer = self._get_customer(customer_id)
        self.session.delete(customer)
        self.session.flush()

        logger.info(
            "customer_deleted",
            extra={"customer_id": str(customer_id), "actor_id": str(actor_id)},
        )

    # -----------------------------------------------------------------
    # Projects
    # -----------------------------------------------------------------

    def _get_project(self, project_id: UUID) -> Project:
        project = self.session.get(Project, project_id)
        if project is None:
            raise ProjectNotFoundError(str(project_id))
        return project

    def _require_customer_ref(self, customer_id: UUID | None) -> UUID:
        if customer_id is None:
            raise UnknownReferenceError("customer", "None")
        if self.session.get(Customer, customer_id) is None:
            logger.warning(
                "project_customer_unknown",
                extra={"customer_id": str(customer_id)},
            )
            raise UnknownReferenceError("customer", str(customer_id))
        return customer_id

    def get_project(self, project_id: UUID) -> ProjectInfo:
        return project_to_info(self._get_project(project_id))

    def list_projects(
        self,
        active_only: bool = False,
        customer_id: UUID | None = None,
    ) -> list[ProjectInfo]:
        return self._selector.list_projects(
            active_only=active_only, customer_id=customer_id,
        )

    def projects_by_customer(self, customer_id: UUID) -> list[ProjectInfo]:
        """Active projects of one customer."""
        return self._selector.projects_by_customer(customer_id)

    def add_project(
        self,
        name: str,
        customer_id: UUID,
        actor_id: UUID,
        description: str = "",
        active: bool = True,
        budget_days: Decimal | int | str | None = None,
        budget_cost: Decimal | int | str | None = None,
        project_id: UUID | None = None,
    ) -> ProjectInfo:
        """
        Create a project under an existing customer.

        Raises:
            MissingFieldError: If name is blank.
            UnknownReferenceError: If the customer doesn't exist.
            InvalidBudgetError: If a budget is negative.
        """
        project = Project(
            name=require_text("Project", "name", name),
            customer_id=self._require_customer_ref(customer_id),
            description=(description or "").strip(),
            active=bool(active),
            budget_days=require_budget("budget_days", budget_days),
            budget_cost=require_budget("budget_cost", budget_cost),
            created_by_id=actor_id,
        )
        if project_id is not None:
            project.id = project_id

        self.session.add(project)
        self.session.flush()

        logger.info(
            "project_added",
            extra={
                "project_id": str(project.id),
                "customer_id": str(project.customer_id),
            },
        )
        return project_to_info(project)

    def update_project(self, info: ProjectInfo, actor_id: UUID) -> ProjectInfo:
        """
        Replace a project's fields.

        Raises:
            ProjectNotFoundError: If ``info.id`` is unknown.
            UnknownReferenceError: If the new customer doesn't exist.
            ProjectCustomerLockedError: If the customer changes while
                entries are booked on the project.
            ValidationError: As for ``add_project``.
        """
        project = self._get_project(info.id)
        name = require_text("Project", "name", info.name)
        budget_days = require_budget("budget_days", info.budget_days)
        budget_cost = require_budget("budget_cost", info.budget_cost)

        if info.customer_id != project.customer_id:
            self._require_customer_ref(info.customer_id)
            entry_count = TimeEntrySelector(self.session).count_for_project(project.id)
            if entry_count:
                logger.warning(
                    "project_customer_locked",
                    extra={"project_id": str(project.id), "entry_count": entry_count},
                )
                raise ProjectCustomerLockedError(str(project.id), entry_count)
            project.customer_id = info.customer_id

        project.name = name
        project.description = (info.description or "").strip()
        project.active = bool(info.active)
        project.budget_days = budget_days
        project.budget_cost = budget_cost
        project.updated_by_id = actor_id
        self.session.flush()

        logger.info("project_updated", extra={"project_id": str(project.id)})
        return project_to_info(project)

    def delete_project(self, project_id: UUID, actor_id: UUID) -> None:
        """
        Remove a project.  Its entries are left in place.

        Raises:
            ProjectNotFoundError: If the project doesn't exist.
        """
        project = self._get_project(project_id)
        self.session.delete(project)
        self.session.flush()

        logger.info(
            "project_deleted",
            extra={"project_id": str(project_id), "actor_id": str(actor_id)},
        )
