"""InsightsStore protocol and its in-memory implementation.

The store keeps finished sessions newest-first, bounded to a fixed history
size. Sessions are never edited or removed except by capacity eviction.
Any durable backend can implement :class:`InsightsStore` as long as it keeps
that ordering, the cap, and the date/week queries.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Protocol, runtime_checkable

from loguru import logger

from napzzz.core.events import SESSION_STORED, Event, EventBus
from napzzz.core.exceptions import ConfigurationError
from napzzz.sleep.models import SleepSession

DEFAULT_CAPACITY = 30

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def parse_weekday(value: str | int) -> int:
    """Map ``"monday"``..``"sunday"`` (or 0-6) to a ``date.weekday()`` index."""
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise ConfigurationError(f"Weekday index must be within 0-6, got {value}")
    name = str(value).strip().lower()
    if name.isdigit():
        return parse_weekday(int(name))
    if name not in WEEKDAYS:
        raise ConfigurationError(f"Unknown weekday {value!r}, expected one of {', '.join(WEEKDAYS)}")
    return WEEKDAYS.index(name)


def week_bounds(anchor: date | datetime, week_start: int = 0) -> tuple[datetime, datetime]:
    """Return the ``[start, end)`` datetimes of the calendar week containing *anchor*."""
    day = anchor.date() if isinstance(anchor, datetime) else anchor
    offset = (day.weekday() - week_start) % 7
    start = datetime.combine(day - timedelta(days=offset), time.min)
    return start, start + timedelta(days=7)


def _day_of(moment: date | datetime) -> date:
    return moment.date() if isinstance(moment, datetime) else moment


@dataclass
class InsightsSettings:
    """Settings for the insights store and aggregation windows.

    Attributes:
        capacity: Maximum number of sessions kept.
        week_start: First weekday of a calendar week (0 = Monday).
        window: Default number of recent sessions for trends and summaries.
    """

    capacity: int = DEFAULT_CAPACITY
    week_start: int = 0
    window: int = 7

    def __post_init__(self):
        if self.capacity < 1:
            raise ConfigurationError(f"insights.capacity must be at least 1, got {self.capacity}")
        if self.window < 1:
            raise ConfigurationError(f"insights.window must be at least 1, got {self.window}")
        self.week_start = parse_weekday(self.week_start)

    @classmethod
    def from_config(cls, config) -> InsightsSettings:
        try:
            return cls(
                capacity=int(config.get("insights.capacity", DEFAULT_CAPACITY)),
                week_start=parse_weekday(config.get("insights.week_start", "monday")),
                window=int(config.get("insights.window", 7)),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid insights settings: {exc}") from exc


@runtime_checkable
class InsightsStore(Protocol):
    """Contract for session history backends."""

    @property
    def sessions(self) -> tuple[SleepSession, ...]:
        """All stored sessions, newest first."""
        ...

    @property
    def latest_session(self) -> SleepSession | None:
        """The most recently added session."""
        ...

    def add_session(self, session: SleepSession) -> None:
        """Insert *session* at the front, evicting the oldest beyond capacity."""
        ...

    def sessions_for_week(self, anchor: date | datetime) -> list[SleepSession]:
        """Sessions whose date falls in the calendar week containing *anchor*."""
        ...

    def session_for_date(self, day: date | datetime) -> SleepSession | None:
        """First stored session on the same calendar day as *day*, if any."""
        ...


class InMemoryInsightsStore:
    """Process-lifetime session history.

    Every mutation builds a new tuple and swaps it in, so readers always see
    either the whole previous history or the whole new one.

    Args:
        capacity: Maximum sessions kept; the oldest are evicted first.
        week_start: First weekday of a calendar week (0 = Monday).
        events: Optional bus on which ``SESSION_STORED`` is published.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        week_start: int = 0,
        events: EventBus | None = None,
    ):
        if capacity < 1:
            raise ConfigurationError(f"Store capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.week_start = parse_weekday(week_start)
        self.events = events
        self._sessions: tuple[SleepSession, ...] = ()
        self._latest: SleepSession | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: InsightsSettings, events: EventBus | None = None) -> InMemoryInsightsStore:
        return cls(capacity=settings.capacity, week_start=settings.week_start, events=events)

    @property
    def sessions(self) -> tuple[SleepSession, ...]:
        return self._sessions

    @property
    def latest_session(self) -> SleepSession | None:
        return self._latest

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[SleepSession]:
        return iter(self._sessions)

    def add_session(self, session: SleepSession) -> None:
        with self._lock:
            self._sessions = (session, *self._sessions)[: self.capacity]
            self._latest = session
            total = len(self._sessions)

        logger.info(f"Sleep session added to insights. Total sessions: {total}")
        if self.events is not None:
            self.events.emit_sync(
                Event(name=SESSION_STORED, payload={"session_id": session.id, "total": total}, source="insights")
            )

    def load(self, sessions: Iterable[SleepSession]) -> None:
        """Replace the history with *sessions*, sorted newest-first by date."""
        ordered = tuple(sorted(sessions, key=lambda s: s.date, reverse=True))[: self.capacity]
        with self._lock:
            self._sessions = ordered
            self._latest = ordered[0] if ordered else None
        logger.debug(f"Loaded {len(ordered)} session(s) into insights")

    def recent(self, count: int) -> tuple[SleepSession, ...]:
        """The *count* most recent sessions, newest first."""
        return self._sessions[: max(count, 0)]

    def sessions_for_week(self, anchor: date | datetime) -> list[SleepSession]:
        start, end = week_bounds(anchor, self.week_start)
        return [s for s in self._sessions if start <= s.date < end]

    def session_for_date(self, day: date | datetime) -> SleepSession | None:
        target = _day_of(day)
        return next((s for s in self._sessions if s.date.date() == target), None)
