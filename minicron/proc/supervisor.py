"""
Supervisor: owns one run of the task.

The supervisor is forked by the scheduler once per period. It forks the child
that execs the command, records the child's pid and then waits, either until
the child exits or until the hard runtime limit (kill-after) expires. Two
signal handlers cut the wait short:

- SIGCHLD: the child exited. Remove the child PID file and exit 0 at once,
  even in the middle of the kill-after sleep.
- SIGTERM: the scheduler's period is over. Escalate against the child with the
  child grace period, remove the child PID file and exit 1.

Every way out of the supervisor removes the child PID file first, and every
way out is os._exit(): the supervisor runs on a forked copy of the scheduler's
stack, which it must not unwind.
"""

from __future__ import annotations

import os
import signal
import time
from types import FrameType
from typing import TYPE_CHECKING, NoReturn

from ..exceptions import PidFileError
from ..log import derive_lg
from ..time import delta_str
from .handle import ProcessHandle, Role
from .launcher import launch
from .pidfile import remove_pid, write_pid
from .signals import fork, unblock

if TYPE_CHECKING:
    from ..config import Settings
    from ..log import Logger
    from ..task import Task

EXIT_OK = 0
EXIT_FAILURE = 1


def describe_status(status: int) -> dict[str, object]:
    """Render a wait status as log fields (exit code or terminating signal)."""
    code = os.waitstatus_to_exitcode(status)
    if code < 0:
        try:
            return {"signal": signal.Signals(-code).name}
        except ValueError:
            return {"signal": -code}
    return {"code": code}


class Supervisor:
    """
    Runs one child under supervision, then exits.

    Args:
        task: The task to run
        settings: Runtime settings (for the child grace period)
        lg: Parent logger, a "supervisor" view is derived from it
    """

    def __init__(self, task: Task, settings: Settings, lg: Logger) -> None:
        self._task = task
        self._grace = settings.child_grace
        self._lg = derive_lg(lg, "supervisor")
        self._child: ProcessHandle | None = None

    @property
    def child(self) -> ProcessHandle | None:
        return self._child

    def run(self) -> NoReturn:
        """Supervise one run of the task. Never returns."""
        # SIGTERM arrives blocked from the scheduler's fork; both stay blocked
        # until the child handle is recorded
        signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGTERM, signal.SIGCHLD})
        signal.signal(signal.SIGTERM, self._handle_term)
        signal.signal(signal.SIGCHLD, self._handle_child_exit)

        try:
            pid = fork(lambda: launch(self._task, derive_lg(self._lg, "child")))
        except OSError as e:
            self._lg.error("cannot fork child", extra={"error": e.strerror})
            os._exit(EXIT_FAILURE)

        self._child = ProcessHandle(pid, Role.CHILD)
        self._write_pidfile(pid)
        self._lg.info(
            "child started", extra={"pid": pid, "command": self._task.executable}
        )
        unblock(signal.SIGTERM, signal.SIGCHLD)

        if self._task.has_limit:
            time.sleep(self._task.kill_after)
            self._lg.info(
                "runtime limit reached",
                extra={"pid": pid, "limit": delta_str(self._task.kill_after)},
            )
            self._child.terminate(self._grace, self._lg)
        else:
            self._wait_child(pid)

        self._remove_pidfile()
        os._exit(EXIT_OK)

    def _wait_child(self, pid: int) -> None:
        """Block until the child exits, normally ending in the SIGCHLD handler."""
        try:
            # WNOWAIT leaves the child unreaped, so the handler still gets its status
            os.waitid(os.P_PID, pid, os.WEXITED | os.WNOWAIT)
        except ChildProcessError:
            return
        self._reap(pid)

    def _reap(self, pid: int) -> None:
        try:
            _, status = os.waitpid(pid, 0)
        except ChildProcessError:
            return
        self._lg.info("child exited", extra={"pid": pid, **describe_status(status)})

    def _write_pidfile(self, pid: int) -> None:
        try:
            write_pid(self._task.child_pidfile, pid)
        except PidFileError as e:
            # The child is already running; losing the record is not a reason to stop it
            self._lg.warning("child PID file not written", extra={"error": e})

    def _remove_pidfile(self) -> None:
        try:
            remove_pid(self._task.child_pidfile)
        except OSError as e:
            self._lg.warning(
                "cannot remove child PID file",
                extra={"path": self._task.child_pidfile, "error": e.strerror},
            )

    def _handle_term(self, signum: int, frame: FrameType | None) -> None:
        """Period is over: escalate against the child, clean up, exit 1."""
        # Neither a repeated request nor the child's exit may re-enter us now
        signal.signal(signal.SIGTERM, signal.SIG_IGN)
        signal.signal(signal.SIGCHLD, signal.SIG_DFL)

        self._lg.debug("termination requested", extra={"signal": signal.Signals(signum).name})
        if self._child is not None:
            self._child.terminate(self._grace, self._lg)
        self._remove_pidfile()
        os._exit(EXIT_FAILURE)

    def _handle_child_exit(self, signum: int, frame: FrameType | None) -> None:
        """Child exited: clean up and exit 0 without waiting any further."""
        if self._child is None:
            return

        try:
            wpid, status = os.waitpid(self._child.pid, os.WNOHANG)
        except ChildProcessError:
            # Already reaped by the escalation probes
            wpid, status = self._child.pid, None
        if wpid == 0:
            return  # stopped or continued, still alive

        fields: dict[str, object] = {"pid": self._child.pid}
        if status is not None:
            fields.update(describe_status(status))
        self._lg.info("child exited", extra=fields)

        self._remove_pidfile()
        os._exit(EXIT_OK)
