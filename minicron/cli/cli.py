#!/usr/bin/env python3
"""
minicron command line entry point.

Usage:
    minicron 300 /usr/local/bin/backup --quiet
    minicron -k10m -p/run/sync.pid -P/run/minicron.pid -d 1h /usr/bin/sync-mirror
"""

import sys
from collections.abc import Sequence

from ..config import Settings
from ..exceptions import ConfigError, MinicronError, UsageError
from ..log import LoggerFactory
from ..proc import Scheduler, TerminationRequested, detach
from .args import PROG, build_parser, parse_args

EXIT_FAILURE = 1


def main(argv: Sequence[str] | None = None) -> int:
    """
    Parse arguments, then run the scheduler until it is terminated.

    Returns:
        Exit code: 11/12 for argument errors, 1 after termination or a
        startup failure. The scheduler loop itself never returns.
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        task = parse_args(argv)
    except UsageError as e:
        build_parser().print_help(sys.stderr)
        sys.stderr.write(f"{PROG}: error: {e}\n")
        return e.exit_code

    try:
        settings = Settings.load()
    except ConfigError as e:
        sys.stderr.write(f"{PROG}: {e}\n")
        return EXIT_FAILURE

    lg = LoggerFactory.create_root(settings.log)

    try:
        if task.detach:
            detach(lg)
        Scheduler(task, settings, lg).run()
    except TerminationRequested:
        lg.info("stopped")
        return EXIT_FAILURE
    except MinicronError as e:
        lg.error("cannot start", extra={"error": e})
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
