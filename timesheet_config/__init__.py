"""
timesheet_config -- single public entrypoint for store settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_config()``.  No other component reads configuration
    files or environment variables directly.

Architecture position:
    Configuration -- sits beside ``timesheet_kernel`` and below
    ``timesheet_services``.  The kernel MUST NEVER import from
    ``timesheet_config``; the store facade turns settings into plain
    constructor arguments.

Failure modes:
    - ``FileNotFoundError`` -- the given or ``$TIMESHEET_CONFIG`` path
      does not exist.
    - ``ValueError`` -- unknown keys or wrongly typed values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from timesheet_config.loader import load_seed_file, load_settings, parse_settings
from timesheet_config.schema import (
    DatabaseSettings,
    LoggingSettings,
    TimesheetSettings,
    WorkdaySettings,
    WorkflowSettings,
)

_logger = logging.getLogger("timesheet_kernel.config")

CONFIG_ENV_VAR = "TIMESHEET_CONFIG"

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(path: Path | str | None = None) -> TimesheetSettings:
    """The ONLY public configuration entrypoint.

    Resolution order: ``path``, then ``$TIMESHEET_CONFIG``, then the
    packaged ``defaults.yaml``.

    Raises:
        FileNotFoundError: If the chosen file does not exist.
        ValueError: If the file fails validation.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or DEFAULTS_PATH
    settings = load_settings(Path(path))

    _logger.info(
        "timesheet_config_loaded",
        extra={
            "source": settings.source,
            "hours_per_day": str(settings.workday.hours_per_day),
            "enforce_transitions": settings.workflow.enforce_transitions,
        },
    )
    return settings


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULTS_PATH",
    "DatabaseSettings",
    "LoggingSettings",
    "TimesheetSettings",
    "WorkdaySettings",
    "WorkflowSettings",
    "get_active_config",
    "load_seed_file",
    "parse_settings",
]
