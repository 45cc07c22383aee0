"""Tests for napzzz.core.config."""

import json
import os

import pytest
import yaml

from napzzz.core.config import DEFAULTS, Config, env_overrides, merge
from napzzz.core.exceptions import ConfigurationError


class TestConfig:
    def test_defaults(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("recorder.phase_interval_seconds") == 30
        assert config.get("recorder.noise_interval_seconds") == 10
        assert config.get("recorder.sound_interval_seconds") == 60
        assert config.get("recorder.sound_probability") == 0.3
        assert config.get("insights.capacity") == 30
        assert config.get("insights.week_start") == "monday"
        assert config.get("simulation.seed") is None

    def test_default_data_dir(self, monkeypatch):
        monkeypatch.delenv("NAPZZZ_PATHS__DATA_DIR", raising=False)
        assert Config().get("paths.data_dir").endswith(".napzzz-data")

    def test_custom_data_dir(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("paths.data_dir") == tmp_dir
        assert config.get("paths.log_dir") == os.path.join(tmp_dir, "logs")

    def test_defaults_are_not_shared(self, tmp_dir):
        Config(data_dir=tmp_dir).data["recorder"]["sound_probability"] = 1.0
        assert DEFAULTS["recorder"]["sound_probability"] == 0.3
        assert Config(data_dir=tmp_dir).get("recorder.sound_probability") == 0.3

    def test_yaml_config_file(self, tmp_config_file):
        config = Config(config_file=tmp_config_file)
        assert config.get("recorder.phase_interval_seconds") == 1800
        assert config.get("insights.week_start") == "sunday"
        # untouched defaults survive the merge
        assert config.get("recorder.noise_interval_seconds") == 10

    def test_json_config_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.json")
        with open(config_path, "w") as f:
            json.dump({"schedule": {"bedtime": "22:30"}}, f)
        config = Config(config_file=config_path, data_dir=tmp_dir)
        assert config.get("schedule.bedtime") == "22:30"
        assert config.get("schedule.wake_time") == "07:00"

    def test_missing_file_uses_defaults(self, tmp_dir):
        config = Config(config_file=os.path.join(tmp_dir, "nope.yaml"), data_dir=tmp_dir)
        assert config.get("insights.capacity") == 30

    def test_empty_yaml_file(self, tmp_dir):
        path = os.path.join(tmp_dir, "empty.yaml")
        open(path, "w").close()
        assert Config(config_file=path, data_dir=tmp_dir).get("insights.capacity") == 30

    @pytest.mark.parametrize(
        "name, content",
        [("list.yaml", "- 1\n- 2\n"), ("broken.json", "{not json"), ("config.toml", "a = 1")],
    )
    def test_bad_files_rejected(self, tmp_dir, name, content):
        path = os.path.join(tmp_dir, name)
        with open(path, "w") as f:
            f.write(content)
        with pytest.raises(ConfigurationError):
            Config(config_file=path, data_dir=tmp_dir)

    def test_get_missing_key(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        assert config.get("nonexistent.key") is None
        assert config.get("nonexistent.key", "fallback") == "fallback"
        assert config.get("recorder.sound_probability.deeper", "x") == "x"


class TestEnvironment:
    def test_env_overrides_file(self, tmp_dir, monkeypatch):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"insights": {"capacity": 5}}, f)

        monkeypatch.setenv("NAPZZZ_INSIGHTS__CAPACITY", "12")
        config = Config(config_file=config_path, data_dir=tmp_dir)
        assert config.get("insights.capacity") == 12

    def test_custom_env_prefix(self, monkeypatch, tmp_dir):
        monkeypatch.setenv("MYAPP_RECORDER__SOUND_PROBABILITY", "0.9")
        config = Config(env_prefix="MYAPP_", data_dir=tmp_dir)
        assert config.get("recorder.sound_probability") == 0.9

    def test_empty_prefix_disables_env(self, monkeypatch, tmp_dir):
        monkeypatch.setenv("NAPZZZ_INSIGHTS__CAPACITY", "12")
        assert Config(env_prefix="", data_dir=tmp_dir).get("insights.capacity") == 30

    def test_value_decoding(self):
        overrides = env_overrides(
            "APP_",
            {
                "APP_SCHEDULE__BEDTIME": "23:00",
                "APP_SIMULATION__SEED": "null",
                "APP_RECORDER__SOUND_PROBABILITY": "0.25",
                "APP_RECORDER__PHASE_INTERVAL_SECONDS": "45",
                "APP_FEATURE__ENABLED": "True",
                "OTHER_IGNORED": "1",
            },
        )
        assert overrides == {
            "schedule": {"bedtime": "23:00"},
            "simulation": {"seed": None},
            "recorder": {"sound_probability": 0.25, "phase_interval_seconds": 45},
            "feature": {"enabled": True},
        }


def test_merge_is_deep():
    base = {"a": {"x": 1, "y": 2}, "b": 1}
    merge(base, {"a": {"y": 3}, "c": {"z": 4}})
    assert base == {"a": {"x": 1, "y": 3}, "b": 1, "c": {"z": 4}}


class TestLogFile:
    def test_unset(self, tmp_dir):
        assert Config(data_dir=tmp_dir).log_file() is None

    def test_bare_name_goes_to_log_dir(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("NAPZZZ_LOGGING__FILE", "napzzz.log")
        path = Config(data_dir=tmp_dir).log_file()
        assert path == os.path.join(tmp_dir, "logs", "napzzz.log")
        assert os.path.isdir(os.path.join(tmp_dir, "logs"))

    def test_explicit_path_kept(self, tmp_dir, monkeypatch):
        target = os.path.join(tmp_dir, "elsewhere", "sleep.log")
        monkeypatch.setenv("NAPZZZ_LOGGING__FILE", target)
        assert Config(data_dir=tmp_dir).log_file() == target
