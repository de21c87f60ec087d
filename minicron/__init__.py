"""
minicron: run one command periodically under a supervised process tree.
"""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    ConfigError,
    DetachError,
    MinicronError,
    PidFileError,
    UsageError,
)
from .task import Task

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("minicron")
except PackageNotFoundError:
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    "ConfigError",
    "DetachError",
    "MinicronError",
    "PidFileError",
    "Task",
    "UsageError",
]
