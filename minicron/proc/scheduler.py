"""
Scheduler: the top-level control loop.

Once per period the scheduler forks a Supervisor, sleeps for the period and
then terminates the supervisor with zero grace. Zero grace means "SIGTERM,
then wait for it": the supervisor has its own SIGTERM handler, which takes
care of the child before the supervisor exits. The loop therefore never has
two supervisors alive at once.

SIGTERM to the scheduler tears down the whole tree: the current supervisor is
terminated, the daemon PID file removed and run() leaves with
TerminationRequested. SIGINT is ignored.
"""

from __future__ import annotations

import signal
import time
from contextlib import ExitStack
from types import FrameType
from typing import TYPE_CHECKING, Any, NoReturn

from ..log import derive_lg
from ..time import delta_str
from .escalate import Termination
from .handle import ProcessHandle, Role
from .pidfile import pid_file
from .signals import blocked, fork
from .supervisor import Supervisor

if TYPE_CHECKING:
    from ..config import Settings
    from ..log import Logger
    from ..task import Task

# The supervisor cleans up after itself on SIGTERM, so it is waited for unconditionally
SUPERVISOR_GRACE = 0


class TerminationRequested(BaseException):
    """
    Raised out of Scheduler.run() once a termination request is handled.

    Like KeyboardInterrupt it is not an Exception: the handler raises it at
    whatever line the main flow is on, and it must get through `except
    Exception` blocks there, such as the one in logging.Handler.emit().
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class Scheduler:
    """
    Runs the task once per period, forever.

    Args:
        task: The task to run
        settings: Runtime settings, handed to each supervisor
        lg: Parent logger, a "scheduler" view is derived from it
    """

    def __init__(self, task: Task, settings: Settings, lg: Logger) -> None:
        self._task = task
        self._settings = settings
        self._root_lg = lg
        self._lg = derive_lg(lg, "scheduler")
        self._supervisor: ProcessHandle | None = None
        self._terminating = False

    @property
    def supervisor(self) -> ProcessHandle | None:
        """The most recently forked supervisor."""
        return self._supervisor

    def run(self) -> NoReturn:
        """
        Loop forever.

        Raises:
            TerminationRequested: After SIGTERM, once the tree is torn down
            PidFileError: If the daemon PID file cannot be written
        """
        signal.signal(signal.SIGTERM, self._handle_term)
        signal.signal(signal.SIGINT, signal.SIG_IGN)

        with ExitStack() as stack:
            # A SIGTERM while the file is written is handled once its removal is registered
            with blocked(signal.SIGTERM):
                stack.enter_context(pid_file(self._task.daemon_pidfile))

            self._lg.info(
                "scheduler started",
                extra={
                    "command": self._task.executable,
                    "period": delta_str(self._task.period),
                    "kill_after": delta_str(self._task.kill_after),
                },
            )
            while True:
                self.run_once()

    def run_once(self) -> Termination | None:
        """
        Run one period: fork a supervisor, sleep, terminate the supervisor.

        Returns:
            How the supervisor was terminated, or None if it could not be
            forked (the caller retries immediately)
        """
        supervisor = self._spawn()
        if supervisor is None:
            return None

        time.sleep(self._task.period)
        return supervisor.terminate(SUPERVISOR_GRACE, self._lg)

    def _spawn(self) -> ProcessHandle | None:
        # SIGTERM stays blocked until the new handle is recorded
        with blocked(signal.SIGTERM):
            try:
                pid = fork(self._supervise)
            except OSError as e:
                self._lg.warning("cannot fork supervisor", extra={"error": e.strerror})
                return None
            self._supervisor = ProcessHandle(pid, Role.SUPERVISOR)

        self._lg.debug("supervisor started", extra={"pid": pid})
        return self._supervisor

    def _supervise(self) -> NoReturn:
        Supervisor(self._task, self._settings, self._root_lg).run()

    def _handle_term(self, signum: int, frame: FrameType | None) -> None:
        """Terminate the current supervisor and unwind out of run()."""
        if self._terminating:
            return
        self._terminating = True

        sig_name = signal.Signals(signum).name
        self._lg.info("termination requested", extra={"signal": sig_name})
        if self._supervisor is not None:
            self._supervisor.terminate(SUPERVISOR_GRACE, self._lg)
        raise TerminationRequested("scheduler terminated", signal=sig_name)
