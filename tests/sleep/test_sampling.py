"""Tests for sleep.sampling: manual and APScheduler-backed samplers."""

import asyncio
from datetime import timedelta

import pytest

from napzzz.core.exceptions import SchedulingError
from napzzz.sleep.sampling import APSamplerScheduler, ManualSamplerScheduler, SamplerScheduler


class TestManualSamplerScheduler:
    def test_satisfies_protocol(self, clock):
        assert isinstance(ManualSamplerScheduler(clock), SamplerScheduler)

    def test_fires_in_time_order(self, clock):
        scheduler = ManualSamplerScheduler(clock)
        start = clock.now()
        fired: list[tuple[str, timedelta]] = []
        scheduler.schedule("slow", 30, lambda: fired.append(("slow", clock.now() - start)))
        scheduler.schedule("fast", 10, lambda: fired.append(("fast", clock.now() - start)))

        count = scheduler.advance(30)

        assert count == 4
        assert fired == [
            ("fast", timedelta(seconds=10)),
            ("fast", timedelta(seconds=20)),
            ("slow", timedelta(seconds=30)),
            ("fast", timedelta(seconds=30)),
        ]
        assert clock.now() == start + timedelta(seconds=30)

    def test_first_fire_is_one_interval_out(self, clock):
        scheduler = ManualSamplerScheduler(clock)
        fired = []
        scheduler.schedule("job", 60, lambda: fired.append(clock.now()))
        assert scheduler.advance(59) == 0
        assert scheduler.advance(1) == 1

    def test_cancel(self, clock):
        scheduler = ManualSamplerScheduler(clock)
        fired = []
        scheduler.schedule("job", 10, lambda: fired.append(1))
        scheduler.cancel("job")
        scheduler.cancel("never-scheduled")
        scheduler.advance(100)
        assert fired == []
        assert scheduler.job_ids == []

    def test_job_can_cancel_itself(self, clock):
        scheduler = ManualSamplerScheduler(clock)
        fired = []

        def tick():
            fired.append(1)
            scheduler.cancel("job")

        scheduler.schedule("job", 10, tick)
        scheduler.advance(100)
        assert fired == [1]

    def test_shutdown_clears_jobs(self, clock):
        scheduler = ManualSamplerScheduler(clock)
        scheduler.schedule("a", 1, lambda: None)
        scheduler.shutdown()
        assert scheduler.job_ids == []

    @pytest.mark.parametrize("interval", [0, -5])
    def test_rejects_non_positive_interval(self, clock, interval):
        with pytest.raises(ValueError):
            ManualSamplerScheduler(clock).schedule("bad", interval, lambda: None)


class TestAPSamplerScheduler:
    def test_start_requires_running_loop(self):
        with pytest.raises(SchedulingError):
            APSamplerScheduler().start()

    def test_pending_jobs_before_start(self):
        scheduler = APSamplerScheduler()
        scheduler.schedule("job", 5, lambda: None)
        scheduler.cancel("job")
        assert not scheduler.running
        assert scheduler.apscheduler is None

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            APSamplerScheduler().schedule("bad", 0, lambda: None)

    async def test_pending_job_registered_on_start(self):
        scheduler = APSamplerScheduler()
        scheduler.schedule("job", 60, lambda: None)
        scheduler.start()
        try:
            assert scheduler.running
            assert scheduler.apscheduler.get_job("job") is not None
        finally:
            scheduler.shutdown()
        assert not scheduler.running

    async def test_cancel_while_running(self):
        scheduler = APSamplerScheduler()
        scheduler.start()
        try:
            scheduler.schedule("job", 60, lambda: None)
            scheduler.cancel("job")
            scheduler.cancel("job")
            assert scheduler.apscheduler.get_job("job") is None
        finally:
            scheduler.shutdown()

    async def test_ticks_run_on_the_loop(self):
        scheduler = APSamplerScheduler()
        ticks = []
        scheduler.start()
        try:
            scheduler.schedule("job", 0.05, lambda: ticks.append(1))
            await asyncio.sleep(0.5)
        finally:
            scheduler.shutdown()
        assert ticks
