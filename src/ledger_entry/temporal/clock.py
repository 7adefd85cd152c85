"""Time abstraction for testability."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Get current local time."""
        ...

    def today(self) -> date:
        """Get the current local date."""
        return self.now().date()


class SystemClock(Clock):
    """Real system time (local timezone, as a user would read a calendar)."""

    def now(self) -> datetime:
        return datetime.now()


class FakeClock(Clock):
    """Controllable clock for testing."""

    def __init__(self, initial: datetime | None = None) -> None:
        self._now = initial or datetime.now()

    def now(self) -> datetime:
        return self._now
