"""
Detaching from the controlling terminal.
"""

from __future__ import annotations

import os
import signal
import sys
from typing import TYPE_CHECKING

from ..exceptions import DetachError

if TYPE_CHECKING:
    from ..log import Logger

DAEMON_UMASK = 0o027

_TTY_SIGNALS = (signal.SIGTSTP, signal.SIGTTIN, signal.SIGTTOU)


def is_detached() -> bool:
    """True when the process was already adopted by init."""
    return os.getppid() == 1


def _redirect_stdio() -> None:
    sys.stdout.flush()
    sys.stderr.flush()

    fd = os.open(os.devnull, os.O_RDWR)
    for target in (0, 1, 2):
        os.dup2(fd, target)
    if fd > 2:
        os.close(fd)


def detach(lg: Logger | None = None) -> None:
    """
    Continue in a background process detached from the terminal.

    Forks, lets the original process exit with status 0, starts a new session,
    ignores terminal job-control signals, closes inherited descriptors and
    points stdin, stdout and stderr at /dev/null. Does nothing if the process
    is already detached.

    Raises:
        DetachError: If fork() or setsid() fails
    """
    if is_detached():
        return

    os.umask(DAEMON_UMASK)

    try:
        pid = os.fork()
    except OSError as e:
        raise DetachError("cannot fork", error=e.strerror)
    if pid > 0:
        if lg:
            lg.debug("detached", extra={"pid": pid})
        sys.stdout.flush()
        sys.stderr.flush()
        os._exit(0)

    try:
        os.setsid()
    except OSError as e:
        raise DetachError("cannot start a new session", error=e.strerror)

    for sig in _TTY_SIGNALS:
        signal.signal(sig, signal.SIG_IGN)

    os.closerange(3, os.sysconf("SC_OPEN_MAX"))
    _redirect_stdio()
