"""
Child launcher: replaces the forked process with the task's command.
"""

from __future__ import annotations

import os
import signal
from typing import TYPE_CHECKING, NoReturn

if TYPE_CHECKING:
    from ..log import Logger
    from ..task import Task

# Exit status of a child whose command could not be executed
EXIT_EXEC_FAILED = 127

# Handlers installed by the supervisor, reset before exec
_SUPERVISOR_SIGNALS = (signal.SIGTERM, signal.SIGCHLD)

# Ignored by the Python runtime at startup; an ignored disposition would
# survive exec, so they go back to the default like in subprocess
_RUNTIME_IGNORED_SIGNALS = ("SIGPIPE", "SIGXFSZ")


def _restore_signals() -> None:
    for sig in _SUPERVISOR_SIGNALS:
        signal.signal(sig, signal.SIG_DFL)
    for name in _RUNTIME_IGNORED_SIGNALS:
        sig = getattr(signal, name, None)
        if sig is not None:
            signal.signal(sig, signal.SIG_DFL)
    signal.pthread_sigmask(signal.SIG_UNBLOCK, _SUPERVISOR_SIGNALS)


def launch(task: Task, lg: Logger | None = None) -> NoReturn:
    """
    Replace the current process image with the task's command.

    The command gets the task's argument vector and the full inherited
    environment. If exec fails the process exits with EXIT_EXEC_FAILED.
    """
    _restore_signals()
    try:
        os.execve(task.executable, list(task.argv), os.environ)
    except OSError as e:
        if lg:
            lg.error(
                "cannot execute command",
                extra={"command": task.executable, "error": e.strerror},
            )
    os._exit(EXIT_EXEC_FAILED)
