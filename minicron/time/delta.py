"""
Duration parsing and formatting.

Periods and runtime limits are given on the command line either as plain
seconds or as compact duration strings; log lines render them back.

Example Usage:
    >>> parse_duration("90")
    90.0

    >>> parse_duration("1m30s")
    90.0

    >>> delta_str(3661)
    '1h1m1s'
"""

import math
import re

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60
MILLISECONDS_PER_SECOND = 1000

# Longer units first so "ms" is not read as "m" followed by garbage
_COMPONENT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)(ms|d|h|m|s)")

_UNIT_SECONDS = {
    "d": SECONDS_PER_DAY,
    "h": SECONDS_PER_HOUR,
    "m": SECONDS_PER_MINUTE,
    "s": 1,
    "ms": 1 / MILLISECONDS_PER_SECOND,
}


class InvalidDurationError(ValueError):
    """Raised when an invalid duration value or string is provided."""

    pass


def _validate_duration_input(secs: float) -> None:
    """
    Validate a numeric duration.

    Raises:
        InvalidDurationError: If input is not a finite, non-negative number
    """
    if not isinstance(secs, (int, float)) or isinstance(secs, bool):
        raise InvalidDurationError(
            f"Duration must be a number, got {type(secs).__name__}"
        )
    if math.isnan(secs):
        raise InvalidDurationError("Duration cannot be NaN")
    if math.isinf(secs):
        raise InvalidDurationError("Duration cannot be infinite")
    if secs < 0:
        raise InvalidDurationError(f"Duration cannot be negative, got {secs}")


def _validate_duration_string(duration_str: str) -> str:
    """Validate and normalize duration string input."""
    if not duration_str or not isinstance(duration_str, str):
        raise InvalidDurationError("Duration string cannot be empty")

    duration_str = duration_str.strip()
    if not duration_str:
        raise InvalidDurationError("Duration string cannot be empty")

    return duration_str


def delta_to_secs(duration_str: str) -> float:
    """
    Parse a compact duration string to seconds.

    Args:
        duration_str: Duration such as "45s", "1h30m" or "250ms"

    Returns:
        Duration in seconds as float

    Raises:
        InvalidDurationError: If the string cannot be parsed or repeats a unit

    Examples:
        >>> delta_to_secs('1h30m')
        5400.0
        >>> delta_to_secs('2d12h30m45s')
        219045.0
    """
    duration_str = _validate_duration_string(duration_str)

    matches = _COMPONENT_PATTERN.findall(duration_str)
    if not matches:
        raise InvalidDurationError(f"Could not parse duration string: '{duration_str}'")

    reconstructed = "".join(f"{val}{unit}" for val, unit in matches)
    if reconstructed != duration_str.replace(" ", ""):
        raise InvalidDurationError(
            f"Invalid characters in duration string: '{duration_str}'"
        )

    total_seconds = 0.0
    seen_units: set[str] = set()
    for value_str, unit in matches:
        if unit in seen_units:
            raise InvalidDurationError(f"Duplicate unit '{unit}' in duration string")
        seen_units.add(unit)
        total_seconds += float(value_str) * _UNIT_SECONDS[unit]

    return total_seconds


def parse_duration(value: str | int | float) -> float:
    """
    Parse a duration given as plain seconds or as a compact duration string.

    Plain numbers ("5", "2.5", 5) are seconds. Anything else goes through
    delta_to_secs().

    Raises:
        InvalidDurationError: If the value is negative, non-finite or unparsable
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        _validate_duration_input(value)
        return float(value)

    text = _validate_duration_string(value)
    try:
        secs = float(text)
    except ValueError:
        return delta_to_secs(text)

    _validate_duration_input(secs)
    return secs


def delta_str(secs: float | None) -> str:
    """
    Format a duration in seconds as a compact human-readable string.

    Whole seconds are shown without a fraction; sub-second remainders are
    shown with millisecond precision when the duration is under a minute.

    Examples:
        >>> delta_str(3661)
        '1h1m1s'
        >>> delta_str(60)
        '1m0s'
        >>> delta_str(2.5)
        '2.500s'
        >>> delta_str(0.25)
        '250ms'
        >>> delta_str(0)
        '0s'
    """
    if secs is None:
        return ""

    _validate_duration_input(secs)

    if secs == 0:
        return "0s"
    if secs < 1:
        return f"{round(secs * MILLISECONDS_PER_SECOND)}ms"

    days, rest = divmod(secs, SECONDS_PER_DAY)
    hours, rest = divmod(rest, SECONDS_PER_HOUR)
    minutes, rest = divmod(rest, SECONDS_PER_MINUTE)

    result = ""
    if days:
        result += f"{int(days)}d"
    if result or hours:
        result += f"{int(hours)}h"
    if result or minutes:
        result += f"{int(minutes)}m"

    isecs = int(rest)
    msecs = round((rest - isecs) * MILLISECONDS_PER_SECOND)
    if msecs >= MILLISECONDS_PER_SECOND:
        isecs, msecs = isecs + 1, 0
    if msecs and not result:
        return f"{isecs}.{msecs:03d}s"
    return result + f"{isecs}s"


__all__ = [
    "delta_str",
    "delta_to_secs",
    "parse_duration",
    "InvalidDurationError",
]
