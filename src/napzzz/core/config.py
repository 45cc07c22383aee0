"""
Layered configuration for napzzz.

Values are resolved in three layers, later layers winning:

1. built-in defaults (:data:`DEFAULTS`),
2. an optional YAML or JSON file,
3. ``NAPZZZ_``-prefixed environment variables, ``__`` separating sections.

Environment values that look like numbers, booleans or null are decoded,
so ``NAPZZZ_RECORDER__SOUND_PROBABILITY=0.5`` yields the float ``0.5`` and
``NAPZZZ_SIMULATION__SEED=null`` yields ``None``. Everything else (``23:00``
included) stays a string.

Library objects never look config up on their own; the CLI builds one
:class:`Config` and hands it to the settings factories::

    config = Config(config_file="napzzz.yaml")
    settings = RecorderSettings.from_config(config)
    config.get("insights.week_start")
"""

from __future__ import annotations

import copy
import json
import os
from typing import Any

import yaml

from .exceptions import ConfigurationError

ENV_PREFIX = "NAPZZZ_"
DATA_DIR_NAME = ".napzzz-data"

DEFAULTS: dict[str, Any] = {
    "logging": {
        "level": "WARNING",
        "file": "",
    },
    "recorder": {
        "phase_interval_seconds": 30,
        "noise_interval_seconds": 10,
        "sound_interval_seconds": 60,
        "sound_probability": 0.3,
        "sleep_goal_hours": 8,
    },
    "insights": {
        "capacity": 30,
        "week_start": "monday",
        "window": 7,
    },
    "schedule": {
        "bedtime": "23:00",
        "wake_time": "07:00",
    },
    "simulation": {
        "seed": None,
    },
}


def merge(base: dict[str, Any], overlay: dict[str, Any]) -> None:
    """Deep-merge *overlay* into *base* in place; nested sections merge key by key."""
    for key, value in overlay.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge(current, value)
        else:
            base[key] = value


def read_config_file(path: str) -> dict[str, Any]:
    """Parse a ``.yaml``/``.yml`` or ``.json`` file into a dict."""
    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path) as f:
            if ext in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            elif ext == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config file type {ext!r} ({path})")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Could not parse config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at the top level")
    return data


def _decode_env_value(raw: str) -> Any:
    text = raw.strip()
    lowered = text.lower()
    if lowered in ("null", "none", "~"):
        return None
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            pass
    return raw


def env_overrides(prefix: str, environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect ``PREFIX_SECTION__KEY=value`` variables into a nested dict."""
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for name, raw in environ.items():
        if not name.startswith(prefix):
            continue
        *sections, leaf = name[len(prefix) :].lower().split("__")
        node = overrides
        for section in sections:
            node = node.setdefault(section, {})
        node[leaf] = _decode_env_value(raw)
    return overrides


class Config:
    """
    Resolved configuration tree with dot-path lookups.

    Args:
        config_file: YAML or JSON file to merge over the defaults. A path
            that does not exist is ignored.
        env_prefix: Prefix of environment overrides; empty disables them.
        data_dir: Base data directory. Defaults to ``~/.napzzz-data``.
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = ENV_PREFIX,
        data_dir: str | None = None,
    ):
        self.config_file = config_file
        self.env_prefix = env_prefix or ""

        base_dir = os.path.expanduser(data_dir or os.path.join("~", DATA_DIR_NAME))
        self.data: dict[str, Any] = copy.deepcopy(DEFAULTS)
        self.data["paths"] = {"data_dir": base_dir, "log_dir": os.path.join(base_dir, "logs")}

        if config_file and os.path.exists(config_file):
            merge(self.data, read_config_file(config_file))
        if self.env_prefix:
            merge(self.data, env_overrides(self.env_prefix))

    def get(self, key_path: str, default: Any = None) -> Any:
        """Look up ``"section.key"``; *default* when any part is missing."""
        node: Any = self.data
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def log_file(self) -> str | None:
        """Resolved ``logging.file``; bare names land in ``paths.log_dir``, which is created."""
        name = self.get("logging.file")
        if not name:
            return None
        path = os.path.expanduser(str(name))
        if not os.path.dirname(path):
            log_dir = os.path.expanduser(str(self.get("paths.log_dir")))
            os.makedirs(log_dir, exist_ok=True)
            path = os.path.join(log_dir, path)
        return path
