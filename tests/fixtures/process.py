"""
Process fixtures for testing.

Provides helpers to fork real child processes and to wait for process-level
side effects, and makes sure nothing outlives the test.
"""

import os
import signal
import time
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from minicron.proc.pidfile import read_pid

DEFAULT_TIMEOUT = 5.0


class Processes:
    """Spawns child processes for a test and kills leftovers at teardown."""

    def __init__(self) -> None:
        self.pids: list[int] = []

    def spawn(self, *argv: str, ignore_term: bool = False) -> int:
        """
        Fork and exec argv (searched on PATH) as a child of the test process.

        Args:
            argv: Command and arguments
            ignore_term: Exec with SIGTERM ignored (the disposition survives exec)
        """
        pid = os.fork()
        if pid == 0:
            try:
                if ignore_term:
                    signal.signal(signal.SIGTERM, signal.SIG_IGN)
                os.execvp(argv[0], list(argv))
            finally:
                os._exit(127)
        self.pids.append(pid)
        return pid

    def track(self, pid: int) -> int:
        """Kill pid at teardown if it is still around."""
        self.pids.append(pid)
        return pid

    def cleanup(self) -> None:
        for pid in self.pids:
            try:
                os.kill(pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            try:
                os.waitpid(pid, 0)
            except ChildProcessError:
                pass


@pytest.fixture
def processes() -> Generator[Processes, None, None]:
    """Provide a Processes helper that cleans up after the test."""
    procs = Processes()
    try:
        yield procs
    finally:
        procs.cleanup()


def wait_until(
    predicate: Callable[[], bool], timeout: float = DEFAULT_TIMEOUT, interval: float = 0.02
) -> bool:
    """Poll predicate until it holds or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def wait_for_pid(path: Path, timeout: float = DEFAULT_TIMEOUT) -> int:
    """Wait for a PID file to appear and return the pid it holds."""
    assert wait_until(lambda: read_pid(path) is not None, timeout), f"{path} never appeared"
    pid = read_pid(path)
    assert pid is not None
    return pid


def wait_exited(pid: int, timeout: float = DEFAULT_TIMEOUT) -> int:
    """
    Reap a child of the test process.

    Returns:
        Its wait status

    Raises:
        AssertionError: If it does not exit within timeout
    """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        wpid, status = os.waitpid(pid, os.WNOHANG)
        if wpid == pid:
            return status
        time.sleep(0.02)
    raise AssertionError(f"process {pid} still running after {timeout}s")


def wait_zombie(pid: int, timeout: float = DEFAULT_TIMEOUT) -> None:
    """Wait for a child to exit without reaping it."""
    assert wait_until(lambda: _exited_unreaped(pid), timeout), f"{pid} did not exit"


def _exited_unreaped(pid: int) -> bool:
    result = os.waitid(os.P_PID, pid, os.WEXITED | os.WNOHANG | os.WNOWAIT)
    return result is not None
