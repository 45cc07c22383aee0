"""Shared test fixtures for napzzz."""

import os
import random
import tempfile
from datetime import datetime

import pytest

from napzzz.core.clock import ManualClock

# Monday night
T0 = datetime(2025, 6, 16, 23, 0)


class FixedRandom:
    """Scripted random source: always the low end of a range, unless told otherwise."""

    def __init__(self, value: float = 0.0, pick_high: bool = False):
        self.value = value
        self.pick_high = pick_high

    def random(self) -> float:
        return self.value

    def uniform(self, a: float, b: float) -> float:
        return b if self.pick_high else a

    def randint(self, a: int, b: int) -> int:
        return b if self.pick_high else a

    def choice(self, seq):
        return seq[-1] if self.pick_high else seq[0]


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
        },
        "recorder": {
            "phase_interval_seconds": 1800,
            "sound_probability": 0.0,
        },
        "insights": {
            "capacity": 10,
            "week_start": "sunday",
        },
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def clock():
    return ManualClock(start=T0)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fixed_random():
    """Factory for :class:`FixedRandom` sources."""
    return FixedRandom
