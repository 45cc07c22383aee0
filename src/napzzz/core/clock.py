"""Clock collaborators.

The recorder and the demo-history generator ask a :class:`Clock` for the
current time instead of calling ``datetime.now()`` directly, so tests and
simulations can run hours of "sleep" instantly.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that can report the current local time."""

    def now(self) -> datetime:
        """Return the current (naive, local) timestamp."""
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()


class ManualClock:
    """A clock that only moves when told to.

    Args:
        start: Initial timestamp. Defaults to the current wall time.
    """

    def __init__(self, start: datetime | None = None):
        self._now = start or datetime.now()

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        """Jump to *value*. Moving backwards is not allowed."""
        if value < self._now:
            raise ValueError(f"ManualClock cannot move backwards ({value} < {self._now})")
        self._now = value

    def advance(self, delta: timedelta | float) -> datetime:
        """Move forward by *delta* (a timedelta or a number of seconds)."""
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self.set(self._now + delta)
        return self._now
