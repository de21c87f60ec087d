"""
Termination escalation.

terminate() drives a child process from running to gone: SIGTERM first, then,
once a grace period has elapsed, SIGKILL. It probes the process without
blocking three times so that a process which is already gone is never
signalled and a process which dies right after SIGTERM never costs a full
grace period:

    probe -> SIGTERM -> (grace == 0) wait for exit
                     -> (grace > 0)  probe -> sleep(grace) -> probe -> SIGKILL

SIGKILL is fire-and-forget; the caller does not wait for it to take effect.
Only children of the calling process can be probed. A pid that is not (or no
longer) our child counts as exited, so calling terminate() again on a reaped
pid neither blocks nor sends anything.
"""

from __future__ import annotations

import enum
import os
import signal
import time
from typing import TYPE_CHECKING

from ..time import delta_str

if TYPE_CHECKING:
    from ..log import Logger


class Termination(enum.Enum):
    """How a terminate() call ended."""

    ALREADY_EXITED = "already-exited"  # gone before anything was sent
    EXITED = "exited"  # reaped after SIGTERM
    KILLED = "killed"  # SIGKILL sent after the grace period


def has_exited(pid: int) -> bool:
    """
    Non-blocking probe. Reaps the process if it has exited.

    Returns:
        True if pid has exited or is not a child of this process
    """
    try:
        wpid, _ = os.waitpid(pid, os.WNOHANG)
    except ChildProcessError:
        return True
    return wpid != 0


def _wait(pid: int) -> None:
    """Block until pid has exited and is reaped."""
    try:
        os.waitpid(pid, 0)
    except ChildProcessError:
        pass  # reaped by someone else meanwhile


def _send(pid: int, sig: signal.Signals, lg: Logger | None) -> None:
    try:
        os.kill(pid, sig)
    except ProcessLookupError:
        if lg:
            lg.trace("process vanished before signal", extra={"pid": pid, "signal": sig.name})
        return
    if lg:
        lg.debug("sent signal", extra={"pid": pid, "signal": sig.name})


def terminate(pid: int, grace: float, lg: Logger | None = None) -> Termination:
    """
    Terminate a child process, escalating to SIGKILL after a grace period.

    Args:
        pid: Pid of a child of the calling process
        grace: Seconds to wait after SIGTERM before SIGKILL. With 0 the call
            blocks until the process has exited and never sends SIGKILL.
        lg: Logger for signal and outcome messages

    Returns:
        The Termination outcome
    """
    if has_exited(pid):
        return Termination.ALREADY_EXITED

    _send(pid, signal.SIGTERM, lg)

    if grace <= 0:
        _wait(pid)
        return Termination.EXITED

    if has_exited(pid):
        return Termination.EXITED

    if lg:
        lg.trace("waiting for exit", extra={"pid": pid, "grace": delta_str(grace)})
    time.sleep(grace)

    if has_exited(pid):
        return Termination.EXITED

    _send(pid, signal.SIGKILL, lg)
    return Termination.KILLED
