"""In-process pub/sub for session lifecycle notifications.

The recorder and the insights store announce what happened; whoever drives
them (the CLI, a UI) decides what to do about it, e.g. switch to the
insights view once a session is finalized::

    bus = EventBus()

    @bus.on(SESSION_FINALIZED)
    def show_insights(event: Event) -> None:
        print(event.payload["session_id"])

Hooks may be plain functions or coroutines. A failing hook is logged and
skipped; it never reaches the publisher.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from time import time
from typing import Any

from loguru import logger

SESSION_STARTED = "sleep.session.started"
SESSION_FINALIZED = "sleep.session.finalized"
SESSION_STORED = "insights.session.stored"

Hook = Callable[["Event"], None] | Callable[["Event"], Awaitable[None]]


@dataclass(frozen=True)
class Event:
    """A published notification. ``timestamp`` is epoch seconds."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)
    source: str = ""


class EventBus:
    """Name-keyed hook registry with sync and async delivery."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = {}
        self._wildcard: list[Hook] = []
        self._pending: set[asyncio.Task] = set()

    def on(self, event_name: str, hook: Hook | None = None):
        """Subscribe *hook* to *event_name*; without *hook*, act as a decorator."""
        if hook is None:
            return lambda fn: self.on(event_name, fn)
        self._hooks.setdefault(event_name, []).append(hook)
        return hook

    def on_all(self, hook: Hook) -> Hook:
        """Subscribe *hook* to every event."""
        self._wildcard.append(hook)
        return hook

    def off(self, event_name: str, hook: Hook) -> None:
        """Unsubscribe *hook*; unknown hooks are ignored."""
        hooks = self._hooks.get(event_name, [])
        if hook in hooks:
            hooks.remove(hook)

    def _subscribers(self, event_name: str) -> list[Hook]:
        return [*self._hooks.get(event_name, ()), *self._wildcard]

    @staticmethod
    def _report(event: Event, exc: Exception) -> None:
        logger.warning(f"Event hook failed for {event.name}: {exc}")

    async def emit(self, event: Event) -> None:
        """Deliver *event*, awaiting coroutine hooks in subscription order."""
        for hook in self._subscribers(event.name):
            try:
                result = hook(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self._report(event, exc)

    def emit_sync(self, event: Event) -> None:
        """Deliver *event* from synchronous code.

        Plain hooks run inline. Coroutine hooks become tasks on the running
        loop, or are skipped (with a debug line) when no loop is running.
        """
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        for hook in self._subscribers(event.name):
            if inspect.iscoroutinefunction(hook):
                if loop is None:
                    logger.debug(f"No running loop, skipping async hook {hook!r} for {event.name}")
                    continue
                task = loop.create_task(self._guarded(hook, event))
                self._pending.add(task)
                task.add_done_callback(self._pending.discard)
                continue
            try:
                hook(event)
            except Exception as exc:
                self._report(event, exc)

    async def _guarded(self, hook: Hook, event: Event) -> None:
        try:
            await hook(event)  # type: ignore[misc]
        except Exception as exc:
            self._report(event, exc)
