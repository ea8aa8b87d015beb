"""
TimesheetSettings schema.

The runtime settings of a timesheet store, parsed from YAML by the loader
and handed to ``timesheet_services`` as a frozen value.  Every section has
defaults, so an empty file is a valid configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"


@dataclass(frozen=True)
class WorkdaySettings:
    """How hours convert into day-equivalents."""

    hours_per_day: Decimal = Decimal("8")


@dataclass(frozen=True)
class WorkflowSettings:
    """Week status workflow switches."""

    # Make update_week_status follow the role transition table
    enforce_transitions: bool = False


@dataclass(frozen=True)
class DatabaseSettings:
    url: str = DEFAULT_DATABASE_URL
    echo: bool = False


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class TimesheetSettings:
    """Complete, validated settings for one store."""

    workday: WorkdaySettings = field(default_factory=WorkdaySettings)
    workflow: WorkflowSettings = field(default_factory=WorkflowSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    # File the settings were read from, None for built-in defaults
    source: str | None = None
