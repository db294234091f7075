"""
Clock -- injectable time source.

Document numbers embed the current date (``2024-01-15-03``,
``SPLV-2024-01-07``) and ledger entries carry ``created_at``, so services
take the time from a ``Clock`` passed in at construction rather than from
``datetime.now()``.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """Source of timezone-aware UTC timestamps."""

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        """Calendar date used in document numbers."""
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock that only moves when told to.

    Defaults to 2024-01-15 09:00 UTC.  ``advance`` moves it forward, e.g.
    across a month end to check that monthly numbers restart their label.
    """

    DEFAULT_TIME = datetime(2024, 1, 15, 9, 0, 0, tzinfo=timezone.utc)

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or self.DEFAULT_TIME

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        if time.tzinfo is None:
            raise ValueError("DeterministicClock needs a timezone-aware datetime")
        self._current = time

    def advance(self, *, days: int = 0, seconds: int = 0) -> datetime:
        """Move forward and return the new time."""
        self._current += timedelta(days=days, seconds=seconds)
        return self._current
