"""
Log formatter for console output.

Renders records as

    [12:34:56,789] [I] supervisor started          [pid:4242] [4241] [/supervisor]

with the message padded to a fixed rule, structured extra fields in brackets,
then the emitting process id and logger name. The process id matters here:
scheduler, supervisor and child share one stderr.
"""

import logging
import os
import re
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .config_holder import LogConfigHolder
from .constants import LogConstants

ConfigLike = LogConfig | LogConfigHolder

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _visual_len(text: str) -> int:
    """Calculate visual width of text, excluding ANSI escape codes."""
    if "\x1b" not in text:
        return len(text)
    return len(_ANSI_PATTERN.sub("", text))


def _record_extra(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "__minicron__extra", None) or {}


class PreFormatter(logging.Formatter):
    """Standard formatter with optional sub-millisecond timestamp digits."""

    def __init__(self, fmt: str, micros: bool) -> None:
        self._micros = micros
        super().__init__(fmt)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        s = super().formatTime(record)
        if self._micros:
            micros = int((record.created % 1) * 1000000) % 1000
            s += f".{micros:03d}"
        return s


class FieldFormatter:
    """Formats bracketed fields, optionally coloured."""

    def __init__(self, holder: LogConfigHolder) -> None:
        self._holder = holder

    def format_field(
        self, value: Any, col: str = "", bold: str = "", name: str = "", quote: bool = False
    ) -> str:
        """
        Format a single field as name[value] (or [value] when anonymous).

        Args:
            value: The value to format
            col: Color escape sequence ("" for plain output)
            bold: Bold color escape sequence
            name: Field name (empty for anonymous fields)
            quote: Whether to escape % characters for logging safety
        """
        if isinstance(value, (list, tuple)):
            mid = ",".join(str(v) for v in value)
        elif isinstance(value, BaseException):
            mid = value.__class__.__name__ + (f": {value}" if str(value) else "")
        else:
            mid = str(value)
        if quote:
            mid = mid.replace("%", "%%")

        if not col:
            head = f"[{name}:" if name else "["
            return head + mid + "]"

        head = ColorManager.RESET + col + (f"{name}[" if name else "[")
        return head + bold + mid + ColorManager.RESET + col + "]"

    def format_fields(self, fields: dict[str, Any], col: str = "", bold: str = "") -> str:
        return " ".join(
            self.format_field(v, col, bold, k, quote=True) for k, v in fields.items()
        )


class LocationRenderer:
    """Renders [file:line] caller locations when enabled."""

    def __init__(self, holder: LogConfigHolder) -> None:
        self._holder = holder

    def render_location(self, record: logging.LogRecord, colored: bool) -> str:
        if not self._holder.location:
            return ""

        pathnames = getattr(record, "__minicron__pathnames", None) or [record.pathname]
        linenos = getattr(record, "__minicron__linenos", None) or [record.lineno]

        fmt = " "
        if colored:
            fmt += ColorManager.RESET + ColorManager.create_gray_level(6) + "m"
        for pathname, lineno in zip(pathnames, linenos):
            fmt += f"[{self._render_pathname(pathname)}:{lineno}]"
        return fmt

    def _render_pathname(self, pathname: str) -> str:
        try:
            return "./" + os.path.relpath(pathname, os.getcwd())
        except ValueError:
            return pathname


class LogFormatter(logging.Formatter):
    """
    Console formatter with structured field rendering.

    Reads display settings through a LogConfigHolder so that every logger
    sharing the holder formats consistently.
    """

    def __init__(self, config: ConfigLike) -> None:
        if isinstance(config, LogConfigHolder):
            self._holder = config
        else:
            self._holder = LogConfigHolder(config)

        self._field_formatter = FieldFormatter(self._holder)
        self._location_renderer = LocationRenderer(self._holder)
        self._cached_micros = self._config.micros
        self._pre_formatter = PreFormatter(
            LogConstants.DEFAULT_FORMAT, self._cached_micros
        )

    @property
    def _config(self) -> LogConfig:
        return self._holder.config

    def format(self, record: logging.LogRecord) -> str:
        fmt = self._build_format(record)

        current_micros = self._config.micros
        if current_micros != self._cached_micros:
            self._cached_micros = current_micros
            self._pre_formatter = PreFormatter(
                LogConstants.DEFAULT_FORMAT, current_micros
            )

        self._pre_formatter._fmt = fmt
        self._pre_formatter._style._fmt = fmt
        return self._pre_formatter.format(record)

    def _calculate_width(self, record: logging.LogRecord) -> int:
        """Width of "[HH:MM:SS,mmm] [L] message" without formatting it."""
        timestamp_len = 16 if self._config.micros else 12
        return 1 + timestamp_len + 4 + 1 + 2 + _visual_len(record.getMessage())

    def _padding(self, record: logging.LogRecord) -> str:
        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        return " " * max(1, rule - self._calculate_width(record))

    def _build_format(self, record: logging.LogRecord) -> str:
        extra = _record_extra(record)
        if not self._config.colors:
            fmt = LogConstants.DEFAULT_FORMAT + self._padding(record)
            if extra:
                fmt += self._field_formatter.format_fields(extra) + " "
            fmt += "[%(process)d] [%(name)s]"
            return fmt + self._location_renderer.render_location(record, colored=False)

        col = ColorManager.get_color_for_level(record.levelno) or ColorManager.DEFAULT
        bold = ColorManager.create_bold_color(col)
        col += "m"

        fmt = self._field_formatter.format_field("%(asctime)s", col)
        fmt += " " + self._field_formatter.format_field("%(levelname).1s", col, bold)
        fmt += " " + bold + "%(message)s" + self._padding(record)
        if extra:
            fmt += self._field_formatter.format_fields(extra, col, bold) + " "

        gray = ColorManager.create_gray_level(9) + "m"
        gray_bold = ColorManager.create_gray_level(9) + ";1m"
        fmt += self._field_formatter.format_field("%(process)d", gray, gray_bold)
        fmt += " " + self._field_formatter.format_field("%(name)s", gray, gray_bold)
        fmt += self._location_renderer.render_location(record, colored=True)
        return col + fmt + ColorManager.RESET
