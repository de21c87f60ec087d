"""
Shared holder for the active LogConfig.

The root logger, its view loggers and the formatter all read display settings
through one holder.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import LogConfig


class LogConfigHolder:
    """
    Holder for the immutable LogConfig shared by a root logger and its views.

    Example:
        >>> holder = LogConfigHolder(LogConfig.from_params("info"))
        >>> holder.level
        20
    """

    def __init__(self, config: LogConfig) -> None:
        self._config = config

    @property
    def config(self) -> LogConfig:
        return self._config

    @property
    def level(self) -> int | bool:
        return self._config.level

    @property
    def location(self) -> int:
        return self._config.location

    @property
    def micros(self) -> bool:
        return self._config.micros

    @property
    def colors(self) -> bool:
        return self._config.colors
