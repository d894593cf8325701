"""
Injectable clock.

Hold deadlines are computed and compared against `IClock.now()` rather than the wall clock,
so expiration can be driven deterministically in tests with `FrozenClock.advance()`.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class IClock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware UTC datetime"""
        pass


class SystemClock(IClock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock(IClock):
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        start = start or datetime.now(timezone.utc)
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._now = start.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, *, seconds: float = 0, minutes: float = 0) -> datetime:
        self._now += timedelta(seconds=seconds, minutes=minutes)
        return self._now

    def set(self, value: datetime) -> None:
        self._now = value.astimezone(timezone.utc)
