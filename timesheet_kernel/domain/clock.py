"""
Injectable time source.

Services stamp week status changes and entry creation times through a
Clock instead of calling ``datetime.now()``, so tests pin time with a
DeterministicClock.  SystemClock is the only place that reads the host clock.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone

from timesheet_kernel.domain.calendar import iso_week_start


class Clock(ABC):
    """``now()`` is always timezone-aware UTC."""

    @abstractmethod
    def now(self) -> datetime: ...

    def today(self) -> date:
        return self.now().date()

    def current_week_start(self) -> date:
        """Monday of the week containing ``today()``."""
        return iso_week_start(self.today())


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock that only moves when told to.

    Defaults to Monday 2024-04-15 09:00 UTC.  ``now()`` is stable between
    calls to ``advance``.
    """

    DEFAULT_START = datetime(2024, 4, 15, 9, 0, tzinfo=timezone.utc)

    def __init__(self, start: datetime | None = None):
        self._current = _require_aware(start or self.DEFAULT_START)

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: float = 0, *, days: int = 0) -> datetime:
        """Move forward and return the new time."""
        self._current += timedelta(days=days, seconds=seconds)
        return self._current


def _require_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError(f"Clock time must be timezone-aware, got {value!r}")
    return value.astimezone(timezone.utc)
