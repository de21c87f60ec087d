"""
Exception hierarchy for minicron.

All errors raised by the package derive from MinicronError, so callers can
catch every minicron failure with a single except clause. Errors raised inside
signal handlers are never of this family: handlers exit the process or
raise TerminationRequested.
"""

from typing import Any


class MinicronError(Exception):
    """
    Base exception for all minicron errors.

    Example:
        try:
            task = parse_args(argv)
        except MinicronError as e:
            lg.error(f"startup failed: {e}")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(MinicronError):
    """
    Runtime settings could not be loaded.

    Examples:
        - Settings file named by MINICRON_CONFIG not found
        - Invalid YAML syntax
        - Value of the wrong type (e.g. negative grace period)
    """

    pass


class UsageError(MinicronError):
    """
    Command line could not be parsed.

    Carries the process exit code the CLI should return, so "too few
    arguments" and "unknown flag" stay distinguishable to callers.
    """

    def __init__(self, message: str, exit_code: int, **context: Any) -> None:
        super().__init__(message, **context)
        self.exit_code = exit_code


class PidFileError(MinicronError):
    """A PID file could not be written."""

    pass


class DetachError(MinicronError):
    """Detaching from the controlling terminal failed."""

    pass
