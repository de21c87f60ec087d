"""
Command line parsing.

    minicron [-p<pidfile>] [-P<pidfile>] [-k<N>] [-d] period command [arguments...]

Option values may be attached (-p/run/job.pid, -k30) or separate
(-p /run/job.pid). Everything after the command is handed to it verbatim,
including arguments that look like options.
"""

from __future__ import annotations

import argparse
import re
from collections.abc import Sequence
from typing import NoReturn

from ..exceptions import UsageError
from ..task import Task
from ..time import InvalidDurationError, parse_duration

PROG = "minicron"

EXIT_TOO_FEW_ARGUMENTS = 11
EXIT_BAD_OPTION = 12

# Options that take a value, attached (-k30) or as the next argument (-k 30)
_VALUE_FLAGS = frozenset("pPk")

_NEGATIVE_NUMBER = re.compile(r"^-\d+$|^-\d*\.\d+$")

USAGE = "%(prog)s [-p<pidfile>] [-P<pidfile>] [-k<N>] [-d] period command [arguments...]"

DESCRIPTION = (
    "Runs the command with the specified arguments every period. "
    "Durations are seconds or compact strings such as 90s, 5m or 1h30m."
)


def duration(value: str) -> float:
    """argparse type for durations."""
    try:
        return parse_duration(value)
    except InvalidDurationError as e:
        raise argparse.ArgumentTypeError(str(e))


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message: str) -> NoReturn:  # type: ignore[override]
        if "the following arguments are required" in message:
            raise UsageError(message, exit_code=EXIT_TOO_FEW_ARGUMENTS)
        raise UsageError(message, exit_code=EXIT_BAD_OPTION)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog=PROG, usage=USAGE, description=DESCRIPTION)
    parser.add_argument(
        "-p",
        dest="child_pidfile",
        metavar="<pidfile>",
        help="save the child PID in pidfile",
    )
    parser.add_argument(
        "-P",
        dest="daemon_pidfile",
        metavar="<pidfile>",
        help="save the daemon PID in pidfile",
    )
    parser.add_argument(
        "-k",
        dest="kill_after",
        metavar="<N>",
        type=duration,
        default=0.0,
        help="kill the child after N seconds",
    )
    parser.add_argument(
        "-d",
        dest="detach",
        action="store_true",
        help="daemonize after starting",
    )
    parser.add_argument("period", type=duration, help="time between two runs")
    parser.add_argument("command", help="path of the executable to run")
    parser.add_argument(
        "arguments", nargs="*", metavar="arguments", help="passed to the command"
    )
    return parser


def _command_index(argv: Sequence[str]) -> int | None:
    """
    Index of the command in argv, or None if argv ends before it.

    Skips options the way argparse reads them (bundled flags, attached or
    separate values, a "--" terminator) and then the period.
    """
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            i += 1
            break
        if not arg.startswith("-") or len(arg) == 1 or _NEGATIVE_NUMBER.match(arg):
            break
        i += 1
        for pos, flag in enumerate(arg[1:], start=2):
            if flag in _VALUE_FLAGS:
                if pos == len(arg):
                    i += 1  # value is the next argument
                break
    command = i + 1
    return command if command < len(argv) else None


def parse_args(argv: Sequence[str]) -> Task:
    """
    Parse the command line (without the program name) into a Task.

    Raises:
        UsageError: With exit_code EXIT_TOO_FEW_ARGUMENTS when period or
            command is missing, EXIT_BAD_OPTION for unknown flags and
            invalid values
    """
    if len(argv) < 2:
        raise UsageError("too few arguments", exit_code=EXIT_TOO_FEW_ARGUMENTS)

    argv = list(argv)
    command = _command_index(argv)
    if command is None:
        head, tail = argv, []
    else:
        # Everything after the command is its own, "--" included
        head, tail = argv[: command + 1], argv[command + 1 :]

    ns = build_parser().parse_args(head)
    return Task.from_command(
        ns.period,
        ns.command,
        tail,
        kill_after=ns.kill_after,
        child_pidfile=ns.child_pidfile,
        daemon_pidfile=ns.daemon_pidfile,
        detach=ns.detach,
    )
