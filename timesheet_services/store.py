"""
TimesheetStore -- the explicit store object callers hold.

Responsibility:
    Owns one database engine and exposes every kernel operation as a
    method that runs in its own transaction: commit on success, rollback
    and re-raise on error.  Settings from ``timesheet_config`` become
    plain constructor arguments of the kernel services here, so the kernel
    never sees configuration.

Lifecycle:
    create (``TimesheetStore(...)`` or ``TimesheetStore.from_config()``)
    -> ``seed()`` -> operate -> ``snapshot()`` -> ``close()``.

Authorization:
    Time entry and week operations are checked by the kernel against the
    owner of the timesheet.  User and catalog maintenance, and the
    user-wide summary, require an actor who can manage timesheets.

Usage:
    store = TimesheetStore.from_config()
    store.seed(load_seed_file("seed.yaml"))
    entry = store.add_time_entry(alice, date(2024, 4, 15), acme.id, web.id, "4")
    store.submit(alice, date(2024, 4, 15))
    data = store.snapshot().to_dict()
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from timesheet_config import TimesheetSettings, get_active_config
from timesheet_kernel.db.engine import (
    build_engine,
    build_session_factory,
    create_tables,
    session_scope,
)
from timesheet_kernel.domain.aggregation import DailyLoad, GroupBy
from timesheet_kernel.domain.clock import Clock, SystemClock
from timesheet_kernel.domain.dtos import (
    CustomerInfo,
    ProjectActuals,
    ProjectInfo,
    Role,
    TimeEntryInfo,
    UserInfo,
    WeekRow,
    WeekStatus,
    WeekStatusInfo,
)
from timesheet_kernel.domain.identity import can_manage_timesheets
from timesheet_kernel.domain.snapshot import StoreSnapshot, snapshot_from_dict
from timesheet_kernel.domain.week_status import allowed_transitions, can_edit_timesheet
from timesheet_kernel.exceptions import PermissionDeniedError
from timesheet_kernel.logging_config import LogContext, configure_logging, get_logger
from timesheet_kernel.selectors import (
    BudgetSelector,
    CatalogSelector,
    ReportSelector,
    TimeEntrySelector,
    UserWeekSummary,
    WeeklyReport,
    WeekStatusSelector,
)
from timesheet_kernel.services import (
    CatalogService,
    SnapshotService,
    TimeEntryService,
    UserService,
    WeekStatusService,
)
from timesheet_kernel.services.week_status_service import require_can_act_for

logger = get_logger("store")


class TimesheetStore:
    """
    Facade over the kernel for one timesheet database.

    Args:
        settings: Store settings; built-in defaults when omitted.
        seed: Initial content, as ``StoreSnapshot`` or its dict form.
        clock: Time source for audit stamps.
        engine: Existing engine to use instead of ``settings.database``.
    """

    def __init__(
        self,
        settings: TimesheetSettings | None = None,
        seed: StoreSnapshot | Mapping[str, Any] | None = None,
        clock: Clock | None = None,
        engine: Engine | None = None,
    ):
        self.settings = settings or TimesheetSettings()
        # No-op when the host application configured logging first
        configure_logging(level=self.settings.logging.level)
        self._clock = clock or SystemClock()
        self._owns_engine = engine is None
        self._engine = engine or build_engine(
            self.settings.database.url, echo=self.settings.database.echo,
        )
        create_tables(self._engine)
        self._factory = build_session_factory(self._engine)
        logger.info(
            "store_created",
            extra={
                "hours_per_day": str(self.hours_per_day),
                "enforce_transitions": self.settings.workflow.enforce_transitions,
            },
        )
        if seed is not None:
            self.seed(seed)

    @classmethod
    def from_config(
        cls,
        path: str | None = None,
        seed: StoreSnapshot | Mapping[str, Any] | None = None,
        clock: Clock | None = None,
    ) -> TimesheetStore:
        return cls(settings=get_active_config(path), seed=seed, clock=clock)

    @property
    def hours_per_day(self) -> Decimal:
        return self.settings.workday.hours_per_day

    def close(self) -> None:
        if self._owns_engine:
            self._engine.dispose()

    def __enter__(self) -> TimesheetStore:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # -----------------------------------------------------------------
    # Plumbing
    # -----------------------------------------------------------------

    @contextmanager
    def _session(self, actor: UserInfo | None = None) -> Iterator[Session]:
        with LogContext.bind(
            correlation_id=str(uuid4()),
            actor_id=str(actor.id) if actor else None,
        ):
            with session_scope(self._factory) as session:
                yield session

    def _week_service(self, session: Session) -> WeekStatusService:
        return WeekStatusService(
            session,
            self._clock,
            enforce_transitions=self.settings.workflow.enforce_transitions,
        )

    def _entry_service(self, session: Session) -> TimeEntryService:
        return TimeEntryService(session, self._clock, self._week_service(session))

    def _require_admin(self, actor: UserInfo, action: str) -> None:
        if not can_manage_timesheets(actor):
            logger.warning(
                "permission_denied",
                extra={"actor_id": str(actor.id), "action": action},
            )
            raise PermissionDeniedError(str(actor.id), action)

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    def seed(
        self,
        data: StoreSnapshot | Mapping[str, Any],
        actor_id: UUID | None = None,
    ) -> dict[str, int]:
        """
        Load initial content; ``data`` is what ``snapshot().to_dict()`` returns.

        Rows keep their ids.  The whole seed is one transaction.
        """
        snapshot = data if isinstance(data, StoreSnapshot) else snapshot_from_dict(data)
        seeder = actor_id or (snapshot.users[0].id if snapshot.users else uuid4())
        with self._session() as session:
            return SnapshotService(session, self._clock).restore(snapshot, seeder)

    def snapshot(self) -> StoreSnapshot:
        with self._session() as session:
            return SnapshotService(session, self._clock).capture()

    def bootstrap_admin(
        self, name: str, email: str, daily_rate: Decimal | int | str | None = None,
    ) -> UserInfo:
        """
        Create the first administrator of an empty user directory.

        Raises:
            PermissionDeniedError: If any user exists already.
        """
        with self._session() as session:
            service = UserService(session, self._clock)
            if service.list_users():
                raise PermissionDeniedError("bootstrap", "bootstrap an administrator")
            new_id = uuid4()
            return service.add_user(
                name, email, actor_id=new_id, role=Role.ADMIN,
                daily_rate=daily_rate, user_id=new_id,
            )

    # -----------------------------------------------------------------
    # Users
    # -----------------------------------------------------------------

    def add_user(
        self,
        actor: UserInfo,
        name: str,
        email: str,
        role: Role | str = Role.USER,
        daily_rate: Decimal | int | str | None = None,
    ) -> UserInfo:
        self._require_admin(actor, "add users")
        with self._session(actor) as session:
            return UserService(session, self._clock).add_user(
                name, email, actor.id, role=role, daily_rate=daily_rate,
            )

    def update_user(self, actor: UserInfo, user: UserInfo) -> UserInfo:
        self._require_admin(actor, "update users")
        with self._session(actor) as session:
            return UserService(session, self._clock).update_user(user, actor.id)

    def delete_user(self, actor: UserInfo, user_id: UUID) -> None:
        self._require_admin(actor, "delete users")
        with self._session(actor) as session:
            UserService(session, self._clock).delete_user(user_id, actor.id)

    def get_user(self, user_id: UUID) -> UserInfo:
        with self._session() as session:
            return UserService(session, self._clock).get_user(user_id)

    def list_users(self) -> list[UserInfo]:
        with self._session() as session:
            return UserService(session, self._clock).list_users()

    # -----------------------------------------------------------------
    # Catalog
    # -----------------------------------------------------------------

    def add_customer(
        self,
        actor: UserInfo,
        name: str,
        contact_person: str = "",
        email: str = "",
        active: bool = True,
    ) -> CustomerInfo:
        self._require_admin(actor, "add customers")
        with self._session(actor) as session:
            return CatalogService(session, self._clock).add_customer(
                name, actor.id, contact_person=contact_person, email=email, active=active,
            )

    def update_customer(self, actor: UserInfo, customer: CustomerInfo) -> CustomerInfo:
        self._require_admin(actor, "update customers")
        with self._session(actor) as session:
            return CatalogService(session, self._clock).update_customer(customer, actor.id)

    def delete_customer(self, actor: UserInfo, customer_id: UUID) -> None:
        self._require_admin(actor, "delete customers")
        with self._session(actor) as session:
            CatalogService(session, self._clock).delete_customer(customer_id, actor.id)

    def get_customer(self, customer_id: UUID) -> CustomerInfo:
        with self._session() as session:
            return CatalogService(session, self._clock).get_customer(customer_id)

    def list_customers(self, active_only: bool = False) -> list[CustomerInfo]:
        with self._session() as session:
            return CatalogSelector(session).list_customers(active_only=active_only)

    def add_project(
        self,
        actor: UserInfo,
        name: str,
        customer_id: UUID,
        description: str = "",
        active: bool = True,
        budget_days: Decimal | int | str | None = None,
        budget_cost: Decimal | int | str | None = None,
    ) -> ProjectInfo:
        self._require_admin(actor, "add projects")
        with self._session(actor) as session:
            return CatalogService(session, self._clock).add_project(
                name,
                customer_id,
                actor.id,
                description=description,
                active=active,
                budget_days=budget_days,
                budget_cost=budget_cost,
            )

    def update_project(self, actor: UserInfo, project: ProjectInfo) -> ProjectInfo:
        self._require_admin(actor, "update projects")
        with self._session(actor) as session:
            return CatalogService(session, self._clock).update_project(project, actor.id)

    def delete_project(self, actor: UserInfo, project_id: UUID) -> None:
        self._require_admin(actor, "delete projects")
        with self._session(actor) as session:
            CatalogService(session, self._clock).delete_project(project_id, actor.id)

    def get_project(self, project_id: UUID) -> ProjectInfo:
        with self._session() as session:
            return CatalogService(session, self._clock).get_project(project_id)

    def list_projects(
        self, active_only: bool = False, customer_id: UUID | None = None,
    ) -> list[ProjectInfo]:
        with self._session() as session:
            return CatalogSelector(session).list_projects(
                active_only=active_only, customer_id=customer_id,
            )

    def projects_by_customer(self, customer_id: UUID) -> list[ProjectInfo]:
        with self._session() as session:
            return CatalogSelector(session).projects_by_customer(customer_id)

    # -----------------------------------------------------------------
    # Time entries
    # -----------------------------------------------------------------

    def add_time_entry(
        self,
        actor: UserInfo,
        entry_date: date,
        customer_id: UUID,
        project_id: UUID,
        hours: Decimal | int | str,
        description: str = "",
        user_id: UUID | None = None,
    ) -> TimeEntryInfo:
        with self._session(actor) as session:
            return self._entry_service(session).add_time_entry(
                actor, entry_date, customer_id, project_id, hours,
                description=description, user_id=user_id,
            )

    def update_time_entry(self, actor: UserInfo, entry: TimeEntryInfo) -> TimeEntryInfo:
        with self._session(actor) as session, LogContext.bind(entry_id=str(entry.id)):
            return self._entry_service(session).update_time_entry(actor, entry)

    def delete_time_entry(self, actor: UserInfo, entry_id: UUID) -> None:
        with self._session(actor) as session, LogContext.bind(entry_id=str(entry_id)):
            self._entry_service(session).delete_time_entry(actor, entry_id)

    def save_week_rows(
        self,
        actor: UserInfo,
        week_start: date,
        rows: Iterable[WeekRow],
        user_id: UUID | None = None,
    ) -> list[TimeEntryInfo]:
        with self._session(actor) as session:
            return self._entry_service(session).save_week_rows(
                actor, week_start, list(rows), user_id=user_id,
            )

    def get_time_entry(self, entry_id: UUID) -> TimeEntryInfo:
        with self._session() as session:
            return TimeEntrySelector(session).get_entry(entry_id)

    def entries_for_date(self, day: date, user_id: UUID | None = None) -> list[TimeEntryInfo]:
        with self._session() as session:
            return TimeEntrySelector(session).entries_for_date(day, user_id=user_id)

    def entries_for_week(
        self, week_start: date, user_id: UUID | None = None,
    ) -> list[TimeEntryInfo]:
        with self._session() as session:
            return TimeEntrySelector(session).entries_for_week(week_start, user_id=user_id)

    def entries_for_project(self, project_id: UUID) -> list[TimeEntryInfo]:
        with self._session() as session:
            return TimeEntrySelector(session).entries_for_project(project_id)

    def list_entries(
        self,
        user_id: UUID | None = None,
        start: date | None = None,
        end: date | None = None,
        project_id: UUID | None = None,
        customer_id: UUID | None = None,
    ) -> list[TimeEntryInfo]:
        with self._session() as session:
            return TimeEntrySelector(session).list_entries(
                user_id=user_id,
                start=start,
                end=end,
                project_id=project_id,
                customer_id=customer_id,
            )

    # -----------------------------------------------------------------
    # Week status
    # -----------------------------------------------------------------

    def current_week_start(self) -> date:
        """The week a timesheet view opens on: Monday of today, per the store clock."""
        return self._clock.current_week_start()

    def get_week_status(self, user_id: UUID, week_start: date) -> WeekStatusInfo | None:
        with self._session() as session:
            return self._week_service(session).get_week_status(user_id, week_start)

    def status_of(self, user_id: UUID, week_start: date) -> WeekStatus:
        with self._session() as session:
            return self._week_service(session).status_of(user_id, week_start)

    def list_week_statuses(self, week_start: date) -> list[WeekStatusInfo]:
        with self._session() as session:
            return WeekStatusSelector(session).list_for_week(week_start)

    def can_edit_timesheet(
        self, actor: UserInfo, week_start: date, user_id: UUID | None = None,
    ) -> bool:
        """Whether ``actor`` may change entries in the owner's week right now."""
        return can_edit_timesheet(self._owner_status(actor, week_start, user_id), actor)

    def allowed_transitions(
        self, actor: UserInfo, week_start: date, user_id: UUID | None = None,
    ) -> frozenset[WeekStatus]:
        """The statuses the actor's workflow actions can move the week to."""
        return allowed_transitions(self._owner_status(actor, week_start, user_id), actor)

    def _owner_status(
        self, actor: UserInfo, week_start: date, user_id: UUID | None,
    ) -> WeekStatus:
        owner_id = user_id or actor.id
        require_can_act_for(actor, owner_id, "view the timesheet")
        with self._session(actor) as session:
            return self._week_service(session).status_of(owner_id, week_start)

    def update_week_status(
        self,
        actor: UserInfo,
        week_start: date,
        status: WeekStatus | str,
        user_id: UUID | None = None,
    ) -> WeekStatusInfo:
        owner_id = user_id or actor.id
        with self._session(actor) as session, LogContext.bind(
            user_id=str(owner_id), week_start=week_start.isoformat(),
        ):
            return self._week_service(session).update_week_status(
                actor, owner_id, week_start, status,
            )

    def _act(self, action: str, actor: UserInfo, week_start: date, user_id: UUID | None):
        owner_id = user_id or actor.id
        with self._session(actor) as session, LogContext.bind(
            user_id=str(owner_id), week_start=week_start.isoformat(),
        ):
            return self._week_service(session).perform(actor, owner_id, week_start, action)

    def submit(
        self, actor: UserInfo, week_start: date, user_id: UUID | None = None,
    ) -> WeekStatusInfo:
        return self._act("submit", actor, week_start, user_id)

    def approve(
        self, actor: UserInfo, week_start: date, user_id: UUID | None = None,
    ) -> WeekStatusInfo:
        return self._act("approve", actor, week_start, user_id)

    def reject(
        self, actor: UserInfo, week_start: date, user_id: UUID | None = None,
    ) -> WeekStatusInfo:
        return self._act("reject", actor, week_start, user_id)

    def reopen(
        self, actor: UserInfo, week_start: date, user_id: UUID | None = None,
    ) -> WeekStatusInfo:
        return self._act("reopen", actor, week_start, user_id)

    # -----------------------------------------------------------------
    # Reports and budgets
    # -----------------------------------------------------------------

    def weekly_report(self, week_start: date, user_id: UUID | None = None) -> WeeklyReport:
        with self._session() as session:
            return ReportSelector(session, self.hours_per_day).weekly_report(
                week_start, user_id=user_id,
            )

    def timesheet_summary(self, actor: UserInfo, week_start: date) -> list[UserWeekSummary]:
        with self._session(actor) as session:
            return ReportSelector(session, self.hours_per_day).timesheet_summary(
                actor, week_start,
            )

    def hours_by(
        self,
        by: GroupBy | str,
        start: date | None = None,
        end: date | None = None,
        user_id: UUID | None = None,
    ) -> dict[str, Decimal]:
        with self._session() as session:
            return ReportSelector(session, self.hours_per_day).hours_by(
                by, start=start, end=end, user_id=user_id,
            )

    def daily_loads(self, user_id: UUID, week_start: date) -> dict[date, DailyLoad]:
        with self._session() as session:
            return ReportSelector(session, self.hours_per_day).daily_loads(
                user_id, week_start,
            )

    def project_actuals(
        self, project_id: UUID, rate_user_id: UUID | None = None,
    ) -> ProjectActuals:
        with self._session() as session:
            return BudgetSelector(session, self.hours_per_day).project_actuals(
                project_id, rate_user_id=rate_user_id,
            )

    def all_project_actuals(self, active_only: bool = False) -> list[ProjectActuals]:
        with self._session() as session:
            return BudgetSelector(session, self.hours_per_day).all_project_actuals(
                active_only=active_only,
            )
