"""
Clock -- injectable source of "now".

Engine and service code never call ``datetime.now()`` or ``date.today()``.
The Semi-Monthly pay period rule and payslip timestamps read the time
through a ``Clock`` handed in by the caller, so a run can be replayed with
the exact processing date it originally had.

    engine = PayrollEngine(config, DeterministicClock(datetime(2024, 3, 20, tzinfo=UTC)))
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone

_DEFAULT_FIXED_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class Clock(ABC):
    """Source of the current instant; ``now()`` is always timezone-aware."""

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        """Calendar date of ``now()`` in the clock's own timezone."""
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock frozen at a given instant until moved explicitly.

    Raises:
        ValueError: for a naive (timezone-less) instant.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._current = self._checked(fixed_time or _DEFAULT_FIXED_TIME)

    @staticmethod
    def _checked(instant: datetime) -> datetime:
        if instant.tzinfo is None:
            raise ValueError("DeterministicClock needs a timezone-aware datetime")
        return instant

    def now(self) -> datetime:
        return self._current

    def set_time(self, instant: datetime) -> None:
        self._current = self._checked(instant)

    def advance(self, seconds: int = 1, *, days: int = 0) -> None:
        self._current += timedelta(days=days, seconds=seconds)
