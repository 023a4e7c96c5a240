"""Clock abstraction for testable time operations"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Union


def ensure_utc(value: datetime) -> datetime:
    """Return value as a timezone-aware UTC datetime (naive values are taken as UTC)"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO-8601 timestamp as sent over the wire.

    Accepts the trailing 'Z' form produced by JavaScript clients.

    Raises:
        ValueError: If value is not a valid ISO-8601 timestamp
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


class Clock(ABC):
    """Abstract clock for time operations"""

    @abstractmethod
    def now(self) -> datetime:
        """Get current time as timezone-aware UTC datetime"""
        pass


class SystemClock(Clock):
    """Production clock using system time"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Test clock that only moves when told to"""

    def __init__(self, fixed_time: datetime):
        self._current_time = ensure_utc(fixed_time)

    def now(self) -> datetime:
        return self._current_time

    def advance(self, delta: Union[timedelta, float]) -> None:
        """
        Advance the clock.

        Args:
            delta: timedelta, or a number of seconds
        """
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self._current_time += delta

    def set(self, new_time: datetime) -> None:
        self._current_time = ensure_utc(new_time)
