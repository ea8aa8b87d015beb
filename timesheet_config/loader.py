"""
Configuration Loader (``timesheet_config.loader``).

Responsibility
--------------
Loads YAML files and parses settings into the frozen dataclasses of
``timesheet_config.schema``.  Runtime callers go through
``timesheet_config.get_active_config()``; this module is the tooling
behind it, plus ``load_seed_file`` for initial store content.

Invariants enforced
-------------------
* Missing keys take the schema defaults.
* Unknown sections or keys and wrongly typed values raise ``ValueError``
  naming the offending key; nothing is coerced silently.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values  -> ``ValueError``.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from timesheet_config.schema import (
    DatabaseSettings,
    LoggingSettings,
    TimesheetSettings,
    WorkdaySettings,
    WorkflowSettings,
)

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

SEED_SECTIONS = frozenset({
    "users",
    "customers",
    "projects",
    "week_statuses",
    "time_entries",
})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def _section(data: dict[str, Any], name: str, keys: set[str]) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{name} must be a mapping, got {type(section).__name__}")
    unknown = set(section) - keys
    if unknown:
        raise ValueError(f"Unknown keys in {name}: {sorted(unknown)}")
    return section


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _positive_decimal(value: Any, key: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{key} must be a number, got {value!r}") from None
    if not number.is_finite() or number <= 0:
        raise ValueError(f"{key} must be greater than zero, got {value!r}")
    return number


def parse_settings(data: dict[str, Any], source: str | None = None) -> TimesheetSettings:
    """
    Build ``TimesheetSettings`` from a parsed YAML document.

    Raises:
        ValueError: On unknown keys or wrongly typed values.
    """
    unknown = set(data) - {"workday", "workflow", "database", "logging"}
    if unknown:
        raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")

    workday = _section(data, "workday", {"hours_per_day"})
    workflow = _section(data, "workflow", {"enforce_transitions"})
    database = _section(data, "database", {"url", "echo"})
    logging_ = _section(data, "logging", {"level"})

    defaults = TimesheetSettings()

    hours_per_day = defaults.workday.hours_per_day
    if "hours_per_day" in workday:
        hours_per_day = _positive_decimal(
            workday["hours_per_day"], "workday.hours_per_day",
        )

    enforce = defaults.workflow.enforce_transitions
    if "enforce_transitions" in workflow:
        enforce = _bool(workflow["enforce_transitions"], "workflow.enforce_transitions")

    url = database.get("url", defaults.database.url)
    if not isinstance(url, str) or not url.strip():
        raise ValueError(f"database.url must be a non-empty string, got {url!r}")
    echo = defaults.database.echo
    if "echo" in database:
        echo = _bool(database["echo"], "database.echo")

    level = logging_.get("level", defaults.logging.level)
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ValueError(
            f"logging.level must be one of {sorted(LOG_LEVELS)}, got {level!r}"
        )

    return TimesheetSettings(
        workday=WorkdaySettings(hours_per_day=hours_per_day),
        workflow=WorkflowSettings(enforce_transitions=enforce),
        database=DatabaseSettings(url=url.strip(), echo=echo),
        logging=LoggingSettings(level=level.upper()),
        source=source,
    )


def load_settings(path: Path) -> TimesheetSettings:
    return parse_settings(load_yaml_file(path), source=str(path))


def load_seed_file(path: Path | str) -> dict[str, list[dict[str, Any]]]:
    """
    Load initial store content (the format ``StoreSnapshot.to_dict()`` writes).

    Only the section layout is checked here; rows are validated when the
    store is seeded.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: On unknown sections or a section that is not a list.
    """
    data = load_yaml_file(Path(path))
    unknown = set(data) - SEED_SECTIONS
    if unknown:
        raise ValueError(f"Unknown seed sections: {sorted(unknown)}")
    seed: dict[str, list[dict[str, Any]]] = {}
    for name in sorted(SEED_SECTIONS):
        rows = data.get(name) or []
        if not isinstance(rows, list):
            raise ValueError(f"Seed section {name} must be a list")
        seed[name] = rows
    return seed
