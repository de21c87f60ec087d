"""
Logging for minicron.

Extends Python's standard logging with:
- Custom TRACE and TRACE2 log levels for detailed debugging
- Colored console output with ANSI escape sequences
- Structured logging with extra fields rendered as [key:value]
- The emitting process id on every line (scheduler, supervisor and child
  processes share one stderr)
- "View" loggers derived from a root logger that share its handler

Log Level Control:
- Use standard levels: debug, info, warning, error, critical
- Use custom levels: trace, trace2
- Disable logging completely: False or "false"
"""

import logging

from .colors import ColorManager
from .config import LogConfig
from .config_holder import LogConfigHolder
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter
from .logger import Logger

logging.addLevelName(LogConstants.CUSTOM_LEVELS["TRACE"], "TRACE")
logging.addLevelName(LogConstants.CUSTOM_LEVELS["TRACE2"], "TRACE2")

LogConstants.LEVEL_NAMES.update(
    {
        "trace": LogConstants.CUSTOM_LEVELS["TRACE"],
        "trace2": LogConstants.CUSTOM_LEVELS["TRACE2"],
    }
)

ColorManager.add_custom_level_colors()


def derive_lg(lg: Logger, tags: str | list[str]) -> Logger:
    """
    Derive a view logger with tags from a parent logger.

    Example:
        >>> supervisor_lg = derive_lg(root_lg, "supervisor")
    """
    return LoggerFactory.derive(lg, tags)


__all__ = [
    "ColorManager",
    "InvalidLogLevelError",
    "LogConfig",
    "LogConfigHolder",
    "LogConstants",
    "LogError",
    "LogFormatter",
    "Logger",
    "LoggerFactory",
    "derive_lg",
]
