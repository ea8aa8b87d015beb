"""ORM models. Importing this package registers every table on Base.metadata."""

from timesheet_kernel.models.catalog import Customer, Project
from timesheet_kernel.models.timesheet import TimeEntry, WeekStatusRecord
from timesheet_kernel.models.user import User

__all__ = [
    "Customer",
    "Project",
    "TimeEntry",
    "User",
    "WeekStatusRecord",
]
