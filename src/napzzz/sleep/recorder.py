"""Sleep session recorder.

Owns the lifecycle of one sleep session: ``idle -> recording -> idle``.
While recording, three sampler jobs simulate phase detection, ambient noise
and sound events. Stopping cancels the samplers, settles the phase timeline,
scores the night, hands the finished :class:`SleepSession` to the insights
store and announces it on the event bus.

Phases tile the session: an awake prefix starts at session start, and each
later phase starts where the previous one ended. At finalization the last
phase is closed at the stop time, so phase percentages add up to 100.
"""

from __future__ import annotations

import random
import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum
from functools import partial
from typing import TYPE_CHECKING

from loguru import logger

from napzzz.core.clock import Clock, SystemClock
from napzzz.core.events import SESSION_FINALIZED, SESSION_STARTED, Event, EventBus
from napzzz.core.exceptions import ConfigurationError
from napzzz.core.types import RandomSource

from .models import (
    NoiseReading,
    SleepActivity,
    SleepPhase,
    SleepPhaseType,
    SleepSession,
    SoundEvent,
    SoundEventType,
)
from .sampling import SamplerScheduler
from .schedule import Schedule
from .scoring import score_sleep
from .waveform import generate_waveform

if TYPE_CHECKING:
    from napzzz.insights.store import InsightsStore

PHASE_CYCLE = (
    SleepPhaseType.LIGHT,
    SleepPhaseType.DEEP,
    SleepPhaseType.REM,
    SleepPhaseType.LIGHT,
)


class RecorderState(StrEnum):
    IDLE = "idle"
    RECORDING = "recording"


@dataclass
class RecorderSettings:
    """Cadences and simulation ranges for the recorder.

    Attributes:
        phase_interval: Seconds between phase-detection ticks.
        noise_interval: Seconds between noise readings.
        sound_interval: Seconds between sound-detection attempts.
        sound_probability: Chance that a sound tick records an event.
        sleep_goal: Goal duration in seconds stamped on each session.
        phase_length: Nominal length of a detected phase, in seconds.
        awake_range: Bounds for the awake prefix, in seconds.
        noise_range: Bounds for noise levels, in dB.
        sound_duration_range: Bounds for sound event length, in seconds.
        intensity_range: Bounds for sound intensity (0-1).
    """

    phase_interval: float = 30.0
    noise_interval: float = 10.0
    sound_interval: float = 60.0
    sound_probability: float = 0.3
    sleep_goal: float = 8 * 3600.0
    phase_length: float = 30 * 60.0
    awake_range: tuple[float, float] = (5 * 60.0, 15 * 60.0)
    noise_range: tuple[float, float] = (20.0, 45.0)
    sound_duration_range: tuple[float, float] = (5.0, 30.0)
    intensity_range: tuple[float, float] = (0.3, 1.0)

    def __post_init__(self):
        for name in ("phase_interval", "noise_interval", "sound_interval", "phase_length", "sleep_goal"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"recorder.{name} must be positive, got {getattr(self, name)}")
        if not 0.0 <= self.sound_probability <= 1.0:
            raise ConfigurationError(f"recorder.sound_probability must be within [0, 1], got {self.sound_probability}")
        if self.noise_range[0] < 0:
            raise ConfigurationError("recorder noise levels must be non-negative")

    @classmethod
    def from_config(cls, config) -> RecorderSettings:
        try:
            return cls(
                phase_interval=float(config.get("recorder.phase_interval_seconds", 30)),
                noise_interval=float(config.get("recorder.noise_interval_seconds", 10)),
                sound_interval=float(config.get("recorder.sound_interval_seconds", 60)),
                sound_probability=float(config.get("recorder.sound_probability", 0.3)),
                sleep_goal=float(config.get("recorder.sleep_goal_hours", 8)) * 3600,
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid recorder settings: {exc}") from exc


class SessionRecorder:
    """State machine for a single active sleep session.

    Args:
        store: Receives every finalized session.
        scheduler: Runs the three sampler jobs.
        clock: Source of session start/stop and sample timestamps.
        rng: Random source for every simulated draw and the score.
        events: Bus on which start/finalize events are published.
        settings: Cadences and simulation ranges.
    """

    def __init__(
        self,
        store: InsightsStore,
        scheduler: SamplerScheduler,
        *,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
        events: EventBus | None = None,
        settings: RecorderSettings | None = None,
    ):
        self.store = store
        self.scheduler = scheduler
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.events = events or EventBus()
        self.settings = settings or RecorderSettings()

        self._lock = threading.Lock()
        self._state = RecorderState.IDLE
        self._generation = 0
        self._job_ids: list[str] = []
        self._start_time: datetime | None = None
        self._cursor: datetime | None = None
        self._activities: frozenset[SleepActivity] = frozenset()
        self._schedule: Schedule | None = None
        self._phases: list[SleepPhase] = []
        self._sounds: list[SoundEvent] = []
        self._noise: list[NoiseReading] = []
        self._latest: SleepSession | None = None

    # ── Observable state ───────────────────────────────────────────

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state == RecorderState.RECORDING

    @property
    def latest_session(self) -> SleepSession | None:
        return self._latest

    @property
    def started_at(self) -> datetime | None:
        return self._start_time if self.is_recording else None

    @property
    def schedule(self) -> Schedule | None:
        """The schedule hint passed to the current (or last) :meth:`start`."""
        return self._schedule

    @property
    def phases(self) -> tuple[SleepPhase, ...]:
        """Phases recorded so far in the current session."""
        with self._lock:
            return tuple(self._phases)

    @property
    def sounds(self) -> tuple[SoundEvent, ...]:
        with self._lock:
            return tuple(self._sounds)

    @property
    def noise_readings(self) -> tuple[NoiseReading, ...]:
        with self._lock:
            return tuple(self._noise)

    def elapsed(self) -> float:
        """Seconds since the current session started, 0 when idle."""
        start = self.started_at
        return (self.clock.now() - start).total_seconds() if start else 0.0

    # ── Lifecycle ──────────────────────────────────────────────────

    def start(
        self,
        schedule: Schedule | None = None,
        activities: Iterable[SleepActivity] = (),
    ) -> bool:
        """Begin recording. Returns False (and does nothing) if already recording."""
        with self._lock:
            if self._state == RecorderState.RECORDING:
                logger.debug("start() ignored: a session is already recording")
                return False

            self._generation += 1
            generation = self._generation
            self._start_time = self.clock.now()
            self._cursor = None
            self._schedule = schedule
            self._activities = frozenset(activities)
            self._phases = []
            self._sounds = []
            self._noise = []
            self._state = RecorderState.RECORDING

            s = self.settings
            jobs = (
                ("phase", s.phase_interval, self._phase_tick),
                ("noise", s.noise_interval, self._noise_tick),
                ("sound", s.sound_interval, self._sound_tick),
            )
            self._job_ids = []
            for name, interval, tick in jobs:
                job_id = f"sleep-{name}-{generation}"
                self.scheduler.schedule(job_id, interval, partial(tick, generation))
                self._job_ids.append(job_id)
            started = self._start_time

        logger.info(f"Sleep tracking started at {started:%Y-%m-%d %H:%M:%S}")
        self.events.emit_sync(
            Event(name=SESSION_STARTED, payload={"started_at": started.isoformat()}, source="recorder")
        )
        return True

    def stop(self) -> SleepSession | None:
        """Finish the session and return it. Returns None (no-op) when idle."""
        with self._lock:
            if self._state == RecorderState.IDLE:
                logger.debug("stop() ignored: no session is recording")
                return None

            self._state = RecorderState.IDLE
            for job_id in self._job_ids:
                self.scheduler.cancel(job_id)
            self._job_ids = []

            session = self._finalize(self.clock.now())
            self._latest = session

        logger.info(
            f"Sleep tracking ended after {session.total_time / 3600:.2f}h, "
            f"quality score {session.quality.score} ({session.quality.rating})"
        )
        self.store.add_session(session)
        self.events.emit_sync(
            Event(name=SESSION_FINALIZED, payload={"session_id": session.id}, source="recorder")
        )
        return session

    # ── Sampler ticks ──────────────────────────────────────────────

    def _accepting(self, generation: int) -> bool:
        return self._state == RecorderState.RECORDING and generation == self._generation

    def _phase_tick(self, generation: int) -> None:
        with self._lock:
            if not self._accepting(generation):
                return
            now = self.clock.now()
            if not self._phases:
                awake = SleepPhase(
                    type=SleepPhaseType.AWAKE,
                    start_time=self._start_time,
                    duration=self.rng.uniform(*self.settings.awake_range),
                )
                self._phases.append(awake)
                self._cursor = awake.end_time

            while self._cursor <= now:
                offset = (self._cursor - self._start_time).total_seconds()
                phase = SleepPhase(
                    type=PHASE_CYCLE[int(offset // self.settings.phase_length) % len(PHASE_CYCLE)],
                    start_time=self._cursor,
                    duration=self.settings.phase_length,
                )
                self._phases.append(phase)
                self._cursor = phase.end_time
                logger.debug(f"Phase detected: {phase.type} at {phase.start_time:%H:%M:%S}")

    def _noise_tick(self, generation: int) -> None:
        with self._lock:
            if not self._accepting(generation):
                return
            level = self.rng.uniform(*self.settings.noise_range)
            self._noise.append(NoiseReading(timestamp=self.clock.now(), level=level))

    def _sound_tick(self, generation: int) -> None:
        with self._lock:
            if not self._accepting(generation):
                return
            if self.rng.random() >= self.settings.sound_probability:
                return
            sound_type = self.rng.choice(list(SoundEventType))
            waveform = generate_waveform(sound_type, self.rng)
            event = SoundEvent(
                type=sound_type,
                timestamp=self.clock.now(),
                duration=self.rng.uniform(*self.settings.sound_duration_range),
                intensity=self.rng.uniform(*self.settings.intensity_range),
                waveform=waveform,
            )
            self._sounds.append(event)
            logger.debug(f"Sound detected: {sound_type} (intensity {event.intensity:.2f})")

    # ── Finalization ───────────────────────────────────────────────

    def _settle_phases(self, end_time: datetime, total: float) -> tuple[SleepPhase, ...]:
        """Drop phases that never began, close the last one at *end_time*, fill in percentages."""
        kept = [p for p in self._phases if p.start_time < end_time]
        settled = []
        for i, phase in enumerate(kept):
            until = kept[i + 1].start_time if i + 1 < len(kept) else end_time
            duration = (until - phase.start_time).total_seconds()
            percentage = duration / total * 100 if total > 0 else 0.0
            settled.append(replace(phase, duration=duration, percentage=percentage))
        return tuple(settled)

    def _finalize(self, end_time: datetime) -> SleepSession:
        start_time = self._start_time
        total = (end_time - start_time).total_seconds()
        phases = self._settle_phases(end_time, total)
        sounds = tuple(self._sounds)
        quality = score_sleep(total, phases, sounds, self.rng)
        return SleepSession(
            date=start_time,
            start_time=start_time,
            end_time=end_time,
            quality=quality,
            phases=phases,
            sounds=sounds,
            noise_readings=tuple(self._noise),
            goal_duration=self.settings.sleep_goal,
            activities=self._activities,
        )
