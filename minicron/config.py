"""
Runtime settings for minicron.

The task itself comes from the command line only. Settings cover the ambient
knobs around it: logging and the supervisor's grace period for the child.
They are resolved in three layers, later layers winning:

1. Built-in defaults
2. An optional YAML file named by the MINICRON_CONFIG environment variable
3. MINICRON_* environment variables, e.g. MINICRON_LOGGING_LEVEL=debug
   overrides logging.level and MINICRON_CHILD_GRACE=5 overrides child.grace

Example YAML:

    logging:
      level: debug
      colors: false
    child:
      grace: 5
"""

from __future__ import annotations

import copy
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigError
from .log import InvalidLogLevelError, LogConfig

ENV_PREFIX = "MINICRON_"
CONFIG_ENV_VAR = "MINICRON_CONFIG"

# Maximum settings file size (1MB)
MAX_CONFIG_SIZE_BYTES = 1024 * 1024

# Seconds the supervisor waits after SIGTERM before it sends SIGKILL to the child
DEFAULT_CHILD_GRACE = 3.0


def _defaults() -> dict[str, Any]:
    return {
        "logging": {
            "level": "info",
            "colors": sys.stderr.isatty(),
            "location": 0,
            "micros": False,
        },
        "child": {"grace": DEFAULT_CHILD_GRACE},
    }


def _merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a settings file, enforcing the size limit."""
    try:
        file_size = os.path.getsize(path)
    except OSError as e:
        raise ConfigError("settings file not readable", path=str(path), error=str(e))

    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            "settings file too large", path=str(path), size=file_size,
            limit=MAX_CONFIG_SIZE_BYTES,
        )

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError("invalid YAML in settings file", path=str(path), error=str(e))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("settings file must contain a mapping", path=str(path))
    return data


def _convert_env_value(value: str) -> bool | int | float | str | None:
    """Convert an environment variable string to the appropriate type."""
    if value.lower() in ("null", "none", ""):
        return None

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _env_key_to_path(env_key: str) -> list[str]:
    """Convert MINICRON_LOGGING_LEVEL to ['logging', 'level']."""
    return env_key[len(ENV_PREFIX) :].lower().split("_")


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect MINICRON_* variables into a nested override mapping."""
    overrides: dict[str, Any] = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key == CONFIG_ENV_VAR:
            continue

        path = _env_key_to_path(key)
        current = overrides
        for part in path[:-1]:
            current = current.setdefault(part, {})
        current[path[-1]] = _convert_env_value(value)
    return overrides


@dataclass(frozen=True)
class Settings:
    """
    Resolved runtime settings.

    Attributes:
        log: Logging configuration for the root logger
        child_grace: Seconds between SIGTERM and SIGKILL for the child
    """

    log: LogConfig
    child_grace: float = DEFAULT_CHILD_GRACE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Settings:
        """
        Build settings from a nested mapping.

        Raises:
            ConfigError: If a value has the wrong type or range
        """
        try:
            log = LogConfig.from_config(dict(data), "logging")
        except InvalidLogLevelError as e:
            raise ConfigError("invalid logging level", error=str(e))
        except (TypeError, ValueError) as e:
            raise ConfigError("invalid logging settings", error=str(e))

        child = data.get("child") or {}
        if not isinstance(child, Mapping):
            raise ConfigError("child settings must be a mapping", value=child)

        grace = child.get("grace", DEFAULT_CHILD_GRACE)
        if isinstance(grace, bool) or not isinstance(grace, (int, float)):
            raise ConfigError("child.grace must be a number of seconds", value=grace)
        if grace < 0:
            raise ConfigError("child.grace cannot be negative", value=grace)

        return cls(log=log, child_grace=float(grace))

    @classmethod
    def load(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Resolve settings from defaults, the optional file and the environment.

        Args:
            environ: Environment to read, os.environ by default

        Raises:
            ConfigError: If the settings file or a value is invalid
        """
        if environ is None:
            environ = os.environ

        data = _defaults()
        config_file = environ.get(CONFIG_ENV_VAR)
        if config_file:
            data = _merge(data, _load_yaml(Path(config_file).expanduser()))

        data = _merge(data, _env_overrides(environ))
        return cls.from_dict(data)
