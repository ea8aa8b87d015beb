"""
Typed Exception Hierarchy for the Timesheet Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every failure the kernel can produce is an expected, user-facing condition:
a missing field, a locked week, a stale id.  Callers react to the *kind* of
failure (re-prompt, show "timesheet is locked", refresh stale data), so each
kind gets its own class and a machine-readable ``code``.

Example - WRONG way to handle errors:
    try:
        entries.add_time_entry(actor, ...)
    except Exception as e:
        if "locked" in str(e):  # FRAGILE - message might change
            show_locked_banner()

Example - RIGHT way:
    try:
        entries.add_time_entry(actor, ...)
    except LockedWeekError as e:
        show_locked_banner(week=e.week_start, status=e.status)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from TimesheetKernelError:

    TimesheetKernelError (base)
    |
    +-- ValidationError
    |   +-- MissingFieldError
    |   +-- InvalidHoursError
    |   +-- InvalidRateError
    |   +-- InvalidBudgetError
    |   +-- InvalidEmailError
    |   +-- InvalidRoleError
    |   +-- NotWeekStartError
    |   +-- DateOutsideWeekError
    |   +-- UnknownReferenceError
    |   +-- ProjectCustomerMismatchError
    |   +-- InactiveCustomerError
    |   +-- InactiveProjectError
    |   +-- ProjectCustomerLockedError
    |   +-- NoEntriesToSaveError
    |
    +-- LockedWeekError
    |
    +-- NotFoundError
    |   +-- UserNotFoundError
    |   +-- CustomerNotFoundError
    |   +-- ProjectNotFoundError
    |   +-- TimeEntryNotFoundError
    |
    +-- AuthorizationError
    |   +-- PermissionDeniedError
    |
    +-- WorkflowError
    |   +-- InvalidWeekTransitionError
    |
    +-- ReferentialError
    |   +-- UserReferencedError
    |
    +-- ConcurrencyError
        +-- OptimisticLockError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | MISSING_FIELD               | Required field empty (name, email, ...)
                | INVALID_HOURS               | hours <= 0
                | INVALID_RATE                | daily rate < 0
                | INVALID_BUDGET              | budget days/cost < 0
                | INVALID_EMAIL               | email without '@'
                | INVALID_ROLE                | role not in {user, admin}
                | NOT_WEEK_START              | week key is not a Monday
                | DATE_OUTSIDE_WEEK           | grid cell dated outside its week
                | UNKNOWN_REFERENCE           | customer/project/user id unknown
                | PROJECT_CUSTOMER_MISMATCH   | project belongs to another customer
                | INACTIVE_CUSTOMER           | new entry against inactive customer
                | INACTIVE_PROJECT            | new entry against inactive project
                | PROJECT_CUSTOMER_LOCKED     | re-parenting a project with entries
                | NO_ENTRIES_TO_SAVE          | weekly grid had nothing to save
----------------|-----------------------------|-----------------------------------------
Lock            | TIMESHEET_LOCKED            | week status forbids mutation for actor
----------------|-----------------------------|-----------------------------------------
Not found       | USER_NOT_FOUND              | user id doesn't exist
                | CUSTOMER_NOT_FOUND          | customer id doesn't exist
                | PROJECT_NOT_FOUND           | project id doesn't exist
                | TIME_ENTRY_NOT_FOUND        | entry id doesn't exist (stale data)
----------------|-----------------------------|-----------------------------------------
Authorization   | PERMISSION_DENIED           | acting on another user's timesheet
----------------|-----------------------------|-----------------------------------------
Workflow        | INVALID_WEEK_TRANSITION     | transition not allowed for actor role
----------------|-----------------------------|-----------------------------------------
Referential     | USER_REFERENCED             | deleting a user who owns entries
----------------|-----------------------------|-----------------------------------------
Concurrency     | OPTIMISTIC_LOCK_CONFLICT    | week status changed underneath us

===============================================================================
HANDLING PATTERNS
===============================================================================

1. ValidationError -> re-prompt the user; nothing was written.
2. LockedWeekError -> show "timesheet is locked"; never swallow it.
3. NotFoundError   -> stale data; refresh the view.
4. ConcurrencyError -> the transport layer may retry; the kernel never does.
"""


class TimesheetKernelError(Exception):
    """
    Base exception for all timesheet kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "TIMESHEET_KERNEL_ERROR"


# Validation exceptions


class ValidationError(TimesheetKernelError):
    """Base exception for rejected input. Nothing has been written."""

    code: str = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    """A required field was empty or absent."""

    code: str = "MISSING_FIELD"

    def __init__(self, entity_type: str, field_name: str):
        self.entity_type = entity_type
        self.field_name = field_name
        super().__init__(f"{entity_type} requires a {field_name}")


class InvalidHoursError(ValidationError):
    """Hours must be strictly positive."""

    code: str = "INVALID_HOURS"

    def __init__(self, hours: str):
        self.hours = hours
        super().__init__(f"Hours must be greater than zero, got {hours}")


class InvalidRateError(ValidationError):
    """Daily rate must not be negative."""

    code: str = "INVALID_RATE"

    def __init__(self, daily_rate: str):
        self.daily_rate = daily_rate
        super().__init__(f"Daily rate must not be negative, got {daily_rate}")


class InvalidBudgetError(ValidationError):
    """Project budgets must not be negative."""

    code: str = "INVALID_BUDGET"

    def __init__(self, field_name: str, value: str):
        self.field_name = field_name
        self.value = value
        super().__init__(f"{field_name} must not be negative, got {value}")


class InvalidEmailError(ValidationError):
    """Email address is not plausible."""

    code: str = "INVALID_EMAIL"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Invalid email address: {email!r}")


class InvalidRoleError(ValidationError):
    """Role is not one of the known roles."""

    code: str = "INVALID_ROLE"

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"Unknown role: {role!r}")


class NotWeekStartError(ValidationError):
    """Week keys must be the Monday of an ISO week."""

    code: str = "NOT_WEEK_START"

    def __init__(self, week_start: str):
        self.week_start = week_start
        super().__init__(f"{week_start} is not the Monday of an ISO week")


class DateOutsideWeekError(ValidationError):
    """A weekly grid cell is dated outside the week being saved."""

    code: str = "DATE_OUTSIDE_WEEK"

    def __init__(self, entry_date: str, week_start: str):
        self.entry_date = entry_date
        self.week_start = week_start
        super().__init__(f"{entry_date} is not in the week starting {week_start}")


class UnknownReferenceError(ValidationError):
    """A referenced customer, project or user does not exist."""

    code: str = "UNKNOWN_REFERENCE"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"Unknown {entity_type}: {entity_id}")


class ProjectCustomerMismatchError(ValidationError):
    """The project does not belong to the given customer."""

    code: str = "PROJECT_CUSTOMER_MISMATCH"

    def __init__(self, project_id: str, customer_id: str):
        self.project_id = project_id
        self.customer_id = customer_id
        super().__init__(
            f"Project {project_id} does not belong to customer {customer_id}"
        )


class InactiveCustomerError(ValidationError):
    """New entries cannot target an inactive customer."""

    code: str = "INACTIVE_CUSTOMER"

    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} is inactive")


class InactiveProjectError(ValidationError):
    """New entries cannot target an inactive project."""

    code: str = "INACTIVE_PROJECT"

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project {project_id} is inactive")


class ProjectCustomerLockedError(ValidationError):
    """A project's customer cannot change once entries reference the project."""

    code: str = "PROJECT_CUSTOMER_LOCKED"

    def __init__(self, project_id: str, entry_count: int):
        self.project_id = project_id
        self.entry_count = entry_count
        super().__init__(
            f"Project {project_id} has {entry_count} time entries; "
            "its customer cannot be changed"
        )


class NoEntriesToSaveError(ValidationError):
    """A weekly grid contained no row with a project and positive hours."""

    code: str = "NO_ENTRIES_TO_SAVE"

    def __init__(self, week_start: str):
        self.week_start = week_start
        super().__init__(
            f"No entries to save for week {week_start}: "
            "add hours to at least one project"
        )


# Lock exceptions


class LockedWeekError(TimesheetKernelError):
    """The week's status forbids mutation for the acting role."""

    code: str = "TIMESHEET_LOCKED"

    def __init__(self, user_id: str, week_start: str, status: str):
        self.user_id = user_id
        self.week_start = week_start
        self.status = status
        super().__init__(
            f"Timesheet for week {week_start} is locked ({status})"
        )


# Not-found exceptions


class NotFoundError(TimesheetKernelError):
    """Base exception for ids that do not (or no longer) exist."""

    code: str = "NOT_FOUND"


class UserNotFoundError(NotFoundError):
    """User with given ID was not found."""

    code: str = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class CustomerNotFoundError(NotFoundError):
    """Customer with given ID was not found."""

    code: str = "CUSTOMER_NOT_FOUND"

    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer not found: {customer_id}")


class ProjectNotFoundError(NotFoundError):
    """Project with given ID was not found."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class TimeEntryNotFoundError(NotFoundError):
    """Time entry with given ID was not found."""

    code: str = "TIME_ENTRY_NOT_FOUND"

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"Time entry not found: {entry_id}")


# Authorization exceptions


class AuthorizationError(TimesheetKernelError):
    """Base exception for actions the actor may not perform."""

    code: str = "AUTHORIZATION_ERROR"


class PermissionDeniedError(AuthorizationError):
    """Actor tried to act on a timesheet they do not own or manage."""

    code: str = "PERMISSION_DENIED"

    def __init__(self, actor_id: str, action: str, owner_id: str | None = None):
        self.actor_id = actor_id
        self.action = action
        self.owner_id = owner_id
        target = f" for user {owner_id}" if owner_id else ""
        super().__init__(f"User {actor_id} may not {action}{target}")


# Workflow exceptions


class WorkflowError(TimesheetKernelError):
    """Base exception for week status workflow errors."""

    code: str = "WORKFLOW_ERROR"


class InvalidWeekTransitionError(WorkflowError):
    """The transition is not in the table for the actor's role."""

    code: str = "INVALID_WEEK_TRANSITION"

    def __init__(self, week_start: str, from_status: str, to_status: str, role: str):
        self.week_start = week_start
        self.from_status = from_status
        self.to_status = to_status
        self.role = role
        super().__init__(
            f"Week {week_start}: {role} cannot move {from_status} -> {to_status}"
        )


# Referential exceptions


class ReferentialError(TimesheetKernelError):
    """Base exception for deletes blocked by dependent rows."""

    code: str = "REFERENTIAL_ERROR"


class UserReferencedError(ReferentialError):
    """User still owns time entries and cannot be deleted."""

    code: str = "USER_REFERENCED"

    def __init__(self, user_id: str, entry_count: int):
        self.user_id = user_id
        self.entry_count = entry_count
        super().__init__(
            f"User {user_id} owns {entry_count} time entries and cannot be deleted"
        )


# Concurrency exceptions


class ConcurrencyError(TimesheetKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class OptimisticLockError(ConcurrencyError):
    """Optimistic locking conflict detected."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"Optimistic lock conflict on {entity_type} {entity_id}: "
            "entity was modified by another transaction"
        )
