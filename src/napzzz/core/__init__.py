"""Shared infrastructure: config, events, clock, exceptions, logging."""

from .clock import Clock, ManualClock, SystemClock
from .config import Config
from .events import Event, EventBus
from .exceptions import ConfigurationError, NapzzzError, SchedulingError

__all__ = [
    "Clock",
    "Config",
    "ConfigurationError",
    "Event",
    "EventBus",
    "ManualClock",
    "NapzzzError",
    "SchedulingError",
    "SystemClock",
]
