"""
Module: timesheet_kernel.selectors.budget_selector
Responsibility: Project budget actuals -- loads a project's entries and the
    owners' daily rates, then delegates the arithmetic to the pure
    ``domain.budget`` calculator.
Architecture position: Kernel > Selectors.

Cost attribution:
    Each entry is costed at the daily rate of the user who owns it.  Passing
    ``rate_user_id`` instead prices every entry at that one user's rate (the
    single "current user" simplification of the first version of the tool).
    Owners that no longer exist contribute zero cost and are logged.
"""

from decimal import Decimal
from uuid import UUID

from timesheet_kernel.domain.aggregation import DEFAULT_HOURS_PER_DAY
from timesheet_kernel.domain.budget import compute_project_actuals
from timesheet_kernel.domain.dtos import ProjectActuals
from timesheet_kernel.logging_config import get_logger
from timesheet_kernel.selectors.base import BaseSelector
from timesheet_kernel.selectors.catalog_selector import CatalogSelector
from timesheet_kernel.selectors.time_entry_selector import TimeEntrySelector
from timesheet_kernel.selectors.user_selector import UserSelector

logger = get_logger("selectors.budget")


class BudgetSelector(BaseSelector):

    def __init__(self, session, hours_per_day: Decimal = DEFAULT_HOURS_PER_DAY):
        super().__init__(session)
        self.hours_per_day = Decimal(hours_per_day)
        self._catalog = CatalogSelector(session)
        self._entries = TimeEntrySelector(session)
        self._users = UserSelector(session)

    def project_actuals(
        self,
        project_id: UUID,
        rate_user_id: UUID | None = None,
    ) -> ProjectActuals:
        """
        Days and cost logged on a project against its budgets.

        Raises:
            ProjectNotFoundError: If the project doesn't exist.
            UserNotFoundError: If ``rate_user_id`` is given but unknown.
        """
        project = self._catalog.get_project(project_id)
        entries = self._entries.entries_for_project(project_id)

        if rate_user_id is not None:
            rate = self._users.get_user(rate_user_id).daily_rate
            rates = {entry.user_id: rate for entry in entries}
        else:
            rates = self._users.rates_by_user()
            missing = {e.user_id for e in entries} - rates.keys()
            if missing:
                logger.warning(
                    "budget_rate_missing",
                    extra={
                        "project_id": str(project_id),
                        "user_ids": sorted(str(u) for u in missing),
                    },
                )

        return compute_project_actuals(project, entries, rates, self.hours_per_day)

    def all_project_actuals(self, active_only: bool = False) -> list[ProjectActuals]:
        return [
            self.project_actuals(project.id)
            for project in self._catalog.list_projects(active_only=active_only)
        ]
