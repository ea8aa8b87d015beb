"""
SnapshotService -- bulk load and capture of a whole store.

Responsibility:
    ``restore`` writes a ``StoreSnapshot`` into an empty or partially
    filled database; ``capture`` reads every row back into one.  Restoring
    reproduces stored state, so it skips the week lock and the
    active-catalog check that apply to live edits; field-level rules
    still hold.

Architecture position:
    Kernel > Services -- imperative shell.

Failure modes:
    - ValidationError subclasses on blank names, bad emails or a
      week_start that is not a Monday.
    - IntegrityError from the session when an id or (user, week) pair
      already exists.
"""

from uuid import UUID

from timesheet_kernel.domain.calendar import require_week_start
from timesheet_kernel.domain.snapshot import StoreSnapshot
from timesheet_kernel.domain.validation import require_email, require_text
from timesheet_kernel.logging_config import get_logger
from timesheet_kernel.models import Customer, Project, TimeEntry, User, WeekStatusRecord
from timesheet_kernel.selectors.catalog_selector import CatalogSelector
from timesheet_kernel.selectors.time_entry_selector import TimeEntrySelector
from timesheet_kernel.selectors.user_selector import UserSelector
from timesheet_kernel.selectors.week_status_selector import WeekStatusSelector
from timesheet_kernel.services.base import BaseService

logger = get_logger("services.snapshot")


class SnapshotService(BaseService):

    def capture(self) -> StoreSnapshot:
        catalog = CatalogSelector(self.session)
        return StoreSnapshot(
            users=tuple(UserSelector(self.session).list_users()),
            customers=tuple(catalog.list_customers()),
            projects=tuple(catalog.list_projects()),
            week_statuses=tuple(WeekStatusSelector(self.session).list_all()),
            time_entries=tuple(TimeEntrySelector(self.session).list_entries()),
        )

    def restore(self, snapshot: StoreSnapshot, actor_id: UUID) -> dict[str, int]:
        """
        Insert every row of ``snapshot``, keeping its ids.

        Returns:
            Row counts per section.
        """
        now = self._clock.now()

        for u in snapshot.users:
            self.session.add(User(
                id=u.id,
                name=require_text("User", "name", u.name),
                email=require_email("User", u.email),
                role=u.role.value,
                daily_rate=u.daily_rate,
                created_by_id=actor_id,
            ))
        for c in snapshot.customers:
            self.session.add(Customer(
                id=c.id,
                name=require_text("Customer", "name", c.name),
                contact_person=c.contact_person,
                email=c.email,
                active=c.active,
                created_by_id=actor_id,
            ))
        for p in snapshot.projects:
            self.session.add(Project(
                id=p.id,
                name=require_text("Project", "name", p.name),
                customer_id=p.customer_id,
                description=p.description,
                active=p.active,
                budget_days=p.budget_days,
                budget_cost=p.budget_cost,
                created_by_id=actor_id,
            ))
        for w in snapshot.week_statuses:
            self.session.add(WeekStatusRecord(
                user_id=w.user_id,
                week_start=require_week_start(w.week_start),
                status=w.status.value,
                changed_at=now,
                changed_by_id=actor_id,
                created_by_id=actor_id,
            ))
        for e in snapshot.time_entries:
            self.session.add(TimeEntry(
                id=e.id,
                user_id=e.user_id,
                entry_date=e.entry_date,
                customer_id=e.customer_id,
                project_id=e.project_id,
                hours=e.hours,
                description=e.description,
                created_at=now,
                created_by_id=actor_id,
            ))
        self.session.flush()

        counts = {
            "users": len(snapshot.users),
            "customers": len(snapshot.customers),
            "projects": len(snapshot.projects),
            "week_statuses": len(snapshot.week_statuses),
            "time_entries": len(snapshot.time_entries),
        }
        logger.info("store_seeded", extra=counts)
        return counts
