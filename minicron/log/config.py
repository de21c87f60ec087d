"""
Configuration for the logging system.

LogConfig is immutable; loggers share it through a LogConfigHolder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable logger configuration.

    Attributes:
        level: Numeric level, or False to disable logging
        location: Number of caller frames shown as [file:line]
        micros: Whether timestamps carry sub-millisecond digits
        colors: Whether ANSI colours are emitted
    """

    level: int | bool = logging.INFO
    location: int = 0
    micros: bool = False
    colors: bool = True

    @staticmethod
    def _resolve_level(level: str | int | bool) -> int | bool:
        """Resolve level parameter to int or False."""
        from .constants import LogConstants
        from .exceptions import InvalidLogLevelError

        if isinstance(level, bool):
            return False if not level else logging.INFO
        elif isinstance(level, str):
            name = level.strip().lower()
            if name.isnumeric():
                return int(name)
            elif name in LogConstants.LEVEL_NAMES:
                return LogConstants.LEVEL_NAMES[name]
            else:
                raise InvalidLogLevelError(level)
        return level

    @classmethod
    def from_params(
        cls,
        level: str | int | bool,
        location: bool | int = 0,
        micros: bool = False,
        colors: bool = True,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (string name, numeric value, or False to disable logging)
            location: Location display level (bool or int)
            micros: Whether to show microsecond precision
            colors: Whether to enable colored output
        """
        resolved_location = (
            1 if location is True else (0 if location is False else int(location))
        )
        return cls(
            level=cls._resolve_level(level),
            location=resolved_location,
            micros=micros,
            colors=colors,
        )

    @classmethod
    def from_config(cls, config_dict: dict, section: str = "logging") -> LogConfig:
        """
        Create LogConfig from a settings dictionary.

        Args:
            config_dict: Settings dictionary (e.g. Settings.as_dict())
            section: Dotted path of the logging section
        """
        current: dict = config_dict
        for part in section.split("."):
            if isinstance(current, dict) and isinstance(current.get(part), dict):
                current = current[part]
            else:
                current = {}
                break

        level = current.get("level", "info")
        if level == "false":
            level = False

        return cls.from_params(
            level=level,
            location=current.get("location", 0),
            micros=current.get("microseconds", current.get("micros", False)),
            colors=current.get("colors", True),
        )
