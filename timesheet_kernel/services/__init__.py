"""Kernel services - flush-only writes returning DTOs."""

from timesheet_kernel.services.base import BaseService
from timesheet_kernel.services.catalog_service import CatalogService
from timesheet_kernel.services.snapshot_service import SnapshotService
from timesheet_kernel.services.time_entry_service import TimeEntryService
from timesheet_kernel.services.user_service import UserService
from timesheet_kernel.services.week_status_service import WeekStatusService

__all__ = [
    "BaseService",
    "CatalogService",
    "SnapshotService",
    "TimeEntryService",
    "UserService",
    "WeekStatusService",
]
