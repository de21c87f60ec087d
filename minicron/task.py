"""Immutable description of the supervised command."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Task:
    """
    The one command minicron runs, and how.

    Built once at startup from the command line and never modified; every
    process in the hierarchy reads its own forked copy.

    Attributes:
        executable: Path handed to execve(2)
        argv: Argument vector, argv[0] equal to executable
        period: Seconds between two consecutive launches (>= 0)
        kill_after: Hard runtime limit in seconds, 0 for unlimited
        child_pidfile: Where to record the child's pid, or None
        daemon_pidfile: Where to record the scheduler's pid, or None
        detach: Whether to detach from the controlling terminal first
    """

    executable: str
    argv: tuple[str, ...]
    period: float
    kill_after: float = 0
    child_pidfile: str | None = None
    daemon_pidfile: str | None = None
    detach: bool = False

    def __post_init__(self) -> None:
        if self.period < 0:
            raise ValueError(f"period must be >= 0, got {self.period}")
        if self.kill_after < 0:
            raise ValueError(f"kill_after must be >= 0, got {self.kill_after}")
        if not self.argv or self.argv[0] != self.executable:
            raise ValueError("argv[0] must be the executable path")

    @classmethod
    def from_command(
        cls, period: float, command: str, args: list[str] | tuple[str, ...] = (), **kwargs
    ) -> Task:
        """Build a task whose argv is the command followed by its arguments."""
        return cls(
            executable=command, argv=(command, *args), period=period, **kwargs
        )

    @property
    def has_limit(self) -> bool:
        """True when the child runs under a hard runtime limit."""
        return self.kill_after > 0
