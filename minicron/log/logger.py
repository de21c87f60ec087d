"""
Logger class for the logging system.

Extends logging.Logger with trace levels, pre-populated structured fields and
"view" loggers that share the root logger's handlers.
"""

import collections
import logging
from types import FrameType
from typing import Any

from .config import LogConfig
from .config_holder import LogConfigHolder
from .constants import LogConstants


class Logger(logging.Logger):
    """
    Enhanced logger.

    Extends the standard Python logger with:
    - Structured extra fields attached to every record
    - Custom trace and trace2 methods
    - Delegation of handlers to a root logger for derived view loggers
    - Multi-frame caller location tracking
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name
            config: Logger configuration, default LogConfig if None
            extra: Pre-populated extra fields to include in all log records
        """
        if config is None:
            config = LogConfig.from_params("info")

        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._holder: LogConfigHolder | None = None  # Set by factory
        self._extra = extra or {}
        self._root_logger: Logger | None = None  # Set for derived "view" loggers
        self._pending_trace: tuple[list[str], list[int]] | None = None

    @property
    def config(self) -> LogConfig:
        return self._config

    @property
    def location(self) -> int:
        """Location display depth, read through the shared holder."""
        if self._holder:
            return self._holder.location
        return self._config.location

    @property
    def disabled(self) -> bool:
        return self._logging_disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        self._logging_disabled = value

    def setLevel(self, level: int | str) -> None:
        super().setLevel(level)
        # View loggers are not always reachable through Manager._clear_cache()
        self._cache.clear()  # type: ignore[attr-defined]

    def _merge_extra(
        self, extra: dict[str, Any] | collections.OrderedDict | None
    ) -> dict[str, Any]:
        merged: dict[str, Any]
        if isinstance(self._extra, collections.OrderedDict) or isinstance(
            extra, collections.OrderedDict
        ):
            merged = collections.OrderedDict(self._extra)
        else:
            merged = dict(self._extra)
        if extra:
            merged.update(extra)
        return merged

    def makeRecord(  # type: ignore[override]
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: str,
        args: tuple,
        exc_info: Any,
        func: str | None = None,
        extra: dict[str, Any] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create log record, keeping extra fields under a private attribute."""
        merged_extra = self._merge_extra(extra)
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, sinfo=sinfo
        )
        # setattr avoids name mangling of the double underscore prefix
        setattr(record, "__minicron__extra", merged_extra)

        if self._pending_trace is not None:
            pathnames, linenos = self._pending_trace
            self._pending_trace = None
            setattr(record, "__minicron__pathnames", pathnames)
            setattr(record, "__minicron__linenos", linenos)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a TRACE level message."""
        level = LogConstants.CUSTOM_LEVELS["TRACE"]
        if self.isEnabledFor(level):
            self._log(level, msg, args, **kwargs)

    def trace2(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a TRACE2 level message (most verbose level)."""
        level = LogConstants.CUSTOM_LEVELS["TRACE2"]
        if self.isEnabledFor(level):
            self._log(level, msg, args, **kwargs)

    def _log(self, level: int, msg: str, args: tuple, **kwargs: Any) -> None:  # type: ignore[override]
        if self._logging_disabled:
            return
        super()._log(level, msg, args, **kwargs)

    def callHandlers(self, record: logging.LogRecord) -> None:
        """Pass a record to the root logger's handlers for view loggers."""
        if self._root_logger is not None:
            for handler in self._root_logger.handlers:
                if record.levelno >= handler.level:
                    handler.handle(record)
        else:
            super().callHandlers(record)

    def findCaller(
        self, stack_info: bool = False, stacklevel: int = 1
    ) -> tuple[str, int, str, str | None]:
        """
        Locate the caller, remembering up to `location` frames for display.
        """
        f: FrameType | None = logging.currentframe()
        while f is not None:
            fname = f.f_code.co_filename
            if fname == logging.__file__ or fname == __file__:
                f = f.f_back
            else:
                break

        if f is None:
            return "(unknown file)", 0, "(unknown function)", None

        files = [f.f_code.co_filename]
        linenos = [f.f_lineno]
        caller = f
        while len(files) < self.location:
            caller = caller.f_back
            if caller is None:
                break
            files.append(caller.f_code.co_filename)
            linenos.append(caller.f_lineno)

        self._pending_trace = (files, linenos)
        return files[0], linenos[0], f.f_code.co_name, None
