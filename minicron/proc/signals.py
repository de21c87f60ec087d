"""
Signal mask and fork helpers.

Each process in the hierarchy records the pid of the process it forks before
its signal handlers may look at it: the signals those handlers react to stay
blocked from just before fork() until the handle is stored.
"""

import os
import signal
import traceback
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import NoReturn


@contextmanager
def blocked(*signals: signal.Signals) -> Iterator[None]:
    """Block signals for the duration of a block, then restore the mask."""
    previous = signal.pthread_sigmask(signal.SIG_BLOCK, signals)
    try:
        yield
    finally:
        signal.pthread_sigmask(signal.SIG_SETMASK, previous)


def unblock(*signals: signal.Signals) -> None:
    signal.pthread_sigmask(signal.SIG_UNBLOCK, signals)


def run_forked(target: Callable[[], object]) -> NoReturn:
    """
    Run target as the body of a freshly forked process and never return.

    The forked process must not unwind into the frames it inherited from its
    parent (their finally blocks belong to the parent), so it always leaves
    through os._exit(). target is expected to exit on its own; returning or
    raising ends the process with status 1.
    """
    try:
        target()
    except BaseException:
        traceback.print_exc()
    finally:
        os._exit(1)


def fork(target: Callable[[], object]) -> int:
    """
    Fork a process running target.

    Returns:
        The child's pid (in the parent only)

    Raises:
        OSError: If fork() fails
    """
    pid = os.fork()
    if pid == 0:
        run_forked(target)
    return pid
