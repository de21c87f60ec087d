"""
PID files.

A PID file holds the decimal pid of the process it represents followed by a
newline, and is created owner-read-only. The functions here keep no state:
whoever knows the path writes it and removes it.
"""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..exceptions import PidFileError

PID_FILE_MODE = 0o400

PathLike = str | os.PathLike


def write_pid(path: PathLike | None, pid: int) -> None:
    """
    Record pid at path. Does nothing when path is None.

    A stale file left behind by an earlier run is replaced; its read-only mode
    would otherwise make it impossible to truncate.

    Raises:
        PidFileError: If the file cannot be created or written
    """
    if path is None:
        return

    target = Path(path)
    try:
        target.unlink(missing_ok=True)
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_EXCL, PID_FILE_MODE)
    except OSError as e:
        raise PidFileError("cannot create PID file", path=str(target), error=e.strerror)

    try:
        os.write(fd, f"{pid}\n".encode("ascii"))
    except OSError as e:
        raise PidFileError("cannot write PID file", path=str(target), error=e.strerror)
    finally:
        os.close(fd)


def remove_pid(path: PathLike | None) -> bool:
    """
    Remove the PID file at path.

    Returns:
        True if a file was removed, False if there was nothing to remove
    """
    if path is None:
        return False
    try:
        os.unlink(path)
    except FileNotFoundError:
        return False
    return True


def read_pid(path: PathLike) -> int | None:
    """
    Read the pid stored at path.

    Returns:
        The pid, or None if the file is missing or does not hold a pid
    """
    try:
        content = Path(path).read_text(encoding="ascii").strip()
        return int(content)
    except (OSError, ValueError):
        return None


@contextmanager
def pid_file(path: PathLike | None, pid: int | None = None) -> Iterator[PathLike | None]:
    """
    Keep a PID file for the duration of a block.

    The file is removed however the block is left, including by an exception
    raised from a signal handler.

    Args:
        path: PID file location, or None for a no-op
        pid: Pid to record, the current process by default
    """
    write_pid(path, os.getpid() if pid is None else pid)
    try:
        yield path
    finally:
        remove_pid(path)
