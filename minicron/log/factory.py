"""
Factory for creating and configuring loggers.
"""

import collections
import logging
import sys
from typing import Any, cast

from .config import LogConfig
from .config_holder import LogConfigHolder
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(config: LogConfig, logger_class: type[Logger] = Logger) -> Logger:
        """
        Create the root logger ("/") with the specified configuration.

        Example:
            >>> lg = LoggerFactory.create_root(LogConfig.from_params("info"))
            >>> lg.info("scheduler started")
            [12:34:56,789] [I] scheduler started      [1234] [/]
        """
        return LoggerFactory.create("/", config, logger_class)

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        logger_class: type[Logger] = Logger,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
        stream: Any = None,
    ) -> Logger:
        """
        Create a logger with its own stderr handler.

        An existing logger of the same name is returned unchanged.

        Args:
            name: Logger name
            config: Logger configuration
            logger_class: Logger class to use
            extra: Pre-populated extra fields to include in all log records
            stream: Output stream, stderr by default (stdout belongs to the task)
        """
        existing = LoggerFactory._check_existing_logger(name)
        if existing:
            return existing

        lg = logger_class(name, config, extra)
        if config.level is not False:
            lg.setLevel(config.level)

        holder = LogConfigHolder(config)
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        if config.level is not False:
            handler.setLevel(config.level)
        handler.setFormatter(LogFormatter(holder))

        lg.addHandler(handler)
        lg._holder = holder
        lg.propagate = False
        lg.parent = logging.root
        logging.root.manager.loggerDict[name] = lg

        lg.trace2(
            "created logger",
            extra={"level": logging.getLevelName(lg.level), "location": config.location},
        )
        return lg

    @staticmethod
    def _check_existing_logger(name: str) -> Logger | None:
        if name in logging.root.manager.loggerDict:
            lg = logging.root.manager.loggerDict[name]
            if isinstance(lg, Logger):
                return lg
        return None

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a "view" logger that delegates to the root's handlers.

        Examples:
            >>> root = LoggerFactory.create_root(config)
            >>> LoggerFactory.derive(root, "supervisor").name
            '/supervisor'
            >>> LoggerFactory.derive(root, ["supervisor", "child"]).name
            '/supervisor/child'

        Args:
            parent: Parent logger instance
            tags: Single tag string or list of tags forming the hierarchy
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        existing = LoggerFactory._check_existing_logger(name)
        if existing:
            return existing

        root = parent._root_logger if parent._root_logger else parent
        lg = parent.__class__(name, parent.config, dict(parent._extra))
        lg.setLevel(logging.NOTSET)
        lg._root_logger = cast(Logger, root)
        lg._holder = root._holder
        lg.parent = parent
        lg.propagate = False
        logging.root.manager.loggerDict[name] = lg

        lg.trace2("derived logger", extra={"root": root.name})
        return lg
