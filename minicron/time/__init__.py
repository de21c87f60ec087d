"""Duration parsing and formatting."""

from .delta import InvalidDurationError, delta_str, delta_to_secs, parse_duration

__all__ = [
    "delta_str",
    "delta_to_secs",
    "parse_duration",
    "InvalidDurationError",
]
