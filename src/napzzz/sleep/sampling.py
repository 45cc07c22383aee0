"""Periodic sampler scheduling.

The recorder registers three interval jobs (phase, noise, sound) on a
:class:`SamplerScheduler` and cancels them together when the session stops.
Two backends are provided:

* :class:`APSamplerScheduler` wraps APScheduler's ``AsyncIOScheduler`` so
  ticks run on the event-loop thread in real time.
* :class:`ManualSamplerScheduler` fires jobs off a :class:`ManualClock`,
  letting tests and the ``simulate`` command replay a whole night instantly.

APScheduler is imported lazily (only in :meth:`APSamplerScheduler.start`) so
the module can be imported without triggering heavy dependencies.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from napzzz.core.clock import ManualClock
from napzzz.core.exceptions import SchedulingError

TickFn = Callable[[], None]
"""Sync callable invoked on every interval."""


@runtime_checkable
class SamplerScheduler(Protocol):
    """Owner of the recorder's periodic sampling jobs."""

    def schedule(self, job_id: str, interval_seconds: float, fn: TickFn) -> None:
        """Run *fn* every *interval_seconds*, first firing one interval from now."""
        ...

    def cancel(self, job_id: str) -> None:
        """Stop *job_id*. Unknown ids are ignored."""
        ...


def _check_interval(interval_seconds: float) -> None:
    if interval_seconds <= 0:
        raise ValueError(f"Sampling interval must be positive, got {interval_seconds}")


async def _run_tick(fn: TickFn) -> None:
    # coroutine wrapper keeps APScheduler on the loop thread instead of its thread pool
    fn()


# ── APScheduler backend ──────────────────────────────────────────────


class APSamplerScheduler:
    """Real-time interval jobs on APScheduler's ``AsyncIOScheduler``.

    Jobs scheduled before :meth:`start` are held and registered on start.

    Args:
        timezone: Timezone handed to APScheduler and its triggers.
    """

    def __init__(self, timezone: str = "UTC"):
        self._timezone = timezone
        self._scheduler: Any = None  # AsyncIOScheduler, lazily created
        self._pending: dict[str, tuple[float, TickFn]] = {}

    def start(self) -> None:
        """Create and start the APScheduler instance.

        Must be called from a running asyncio event loop.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError as exc:
            raise SchedulingError("APSamplerScheduler.start() requires a running event loop") from exc

        from apscheduler.schedulers.asyncio import AsyncIOScheduler

        self._scheduler = AsyncIOScheduler(timezone=self._timezone)
        self._scheduler.start()
        pending, self._pending = self._pending, {}
        for job_id, (interval, fn) in pending.items():
            self._add_job(job_id, interval, fn)
        logger.info(f"APSamplerScheduler started with {len(pending)} pending job(s), tz={self._timezone}")

    def shutdown(self) -> None:
        """Stop the APScheduler instance, dropping all jobs."""
        if self._scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("APSamplerScheduler shut down")
        self._pending.clear()

    @property
    def running(self) -> bool:
        return bool(self._scheduler and self._scheduler.running)

    @property
    def apscheduler(self) -> Any:
        """Expose the raw APScheduler instance, or ``None`` before :meth:`start`."""
        return self._scheduler

    def schedule(self, job_id: str, interval_seconds: float, fn: TickFn) -> None:
        _check_interval(interval_seconds)
        if self.running:
            self._add_job(job_id, interval_seconds, fn)
        else:
            self._pending[job_id] = (interval_seconds, fn)

    def cancel(self, job_id: str) -> None:
        self._pending.pop(job_id, None)
        if not self.running:
            return
        from apscheduler.jobstores.base import JobLookupError

        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            logger.debug(f"Sampler job {job_id} already gone")

    def _add_job(self, job_id: str, interval_seconds: float, fn: TickFn) -> None:
        from apscheduler.triggers.interval import IntervalTrigger

        self._scheduler.add_job(
            _run_tick,
            trigger=IntervalTrigger(seconds=interval_seconds, timezone=self._timezone),
            id=job_id,
            kwargs={"fn": fn},
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        logger.debug(f"Registered sampler job {job_id}: every {interval_seconds}s")


# ── Manual backend ───────────────────────────────────────────────────


@dataclass
class _ManualJob:
    job_id: str
    interval: timedelta
    fn: TickFn
    next_run: datetime
    order: int = field(default=0)


class ManualSamplerScheduler:
    """Deterministic scheduler driven by a :class:`ManualClock`.

    Nothing fires until :meth:`advance` (or :meth:`run_until`) is called.
    Each due job runs with the clock set to its exact fire time; jobs due
    at the same instant run in registration order.
    """

    def __init__(self, clock: ManualClock):
        self.clock = clock
        self._jobs: dict[str, _ManualJob] = {}
        self._counter = itertools.count()

    def schedule(self, job_id: str, interval_seconds: float, fn: TickFn) -> None:
        _check_interval(interval_seconds)
        interval = timedelta(seconds=interval_seconds)
        self._jobs[job_id] = _ManualJob(
            job_id=job_id,
            interval=interval,
            fn=fn,
            next_run=self.clock.now() + interval,
            order=next(self._counter),
        )

    def cancel(self, job_id: str) -> None:
        self._jobs.pop(job_id, None)

    def shutdown(self) -> None:
        self._jobs.clear()

    @property
    def job_ids(self) -> list[str]:
        return list(self._jobs)

    def run_until(self, moment: datetime) -> int:
        """Fire every job due up to and including *moment*; return the fire count."""
        fired = 0
        while True:
            due = [job for job in self._jobs.values() if job.next_run <= moment]
            if not due:
                break
            job = min(due, key=lambda j: (j.next_run, j.order))
            self.clock.set(job.next_run)
            job.next_run += job.interval
            job.fn()
            fired += 1
        self.clock.set(moment)
        return fired

    def advance(self, delta: timedelta | float) -> int:
        """Move the clock forward by *delta*, firing jobs along the way."""
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        return self.run_until(self.clock.now() + delta)
