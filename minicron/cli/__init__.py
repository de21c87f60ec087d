"""Command line interface."""

from .args import EXIT_BAD_OPTION, EXIT_TOO_FEW_ARGUMENTS, build_parser, parse_args
from .cli import EXIT_FAILURE, main

__all__ = [
    "EXIT_BAD_OPTION",
    "EXIT_FAILURE",
    "EXIT_TOO_FEW_ARGUMENTS",
    "build_parser",
    "main",
    "parse_args",
]
