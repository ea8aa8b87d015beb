"""
timesheet_services -- Package init and public API.

Responsibility:
    The store facade that callers hold: one engine, one transaction per
    operation, settings bridged into kernel services.

Architecture position:
    Services -- orchestration over ``timesheet_kernel`` and
    ``timesheet_config``.  Neither of those may import from this package.
"""

from timesheet_services.store import TimesheetStore

__all__ = ["TimesheetStore"]
