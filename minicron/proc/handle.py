"""Process handles: a pid plus the role the process plays."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .escalate import Termination, terminate

if TYPE_CHECKING:
    from ..log import Logger


class Role(enum.Enum):
    SUPERVISOR = "supervisor"
    CHILD = "child"


@dataclass(frozen=True)
class ProcessHandle:
    """
    A process owned by the current one.

    The owner keeps at most one live handle per role and replaces it only
    after the previous process has been reaped.
    """

    pid: int
    role: Role

    def terminate(self, grace: float, lg: Logger | None = None) -> Termination:
        """Escalate termination against this process, see escalate.terminate()."""
        outcome = terminate(self.pid, grace, lg)
        if lg:
            lg.debug(
                f"{self.role.value} terminated",
                extra={"pid": self.pid, "outcome": outcome.value},
            )
        return outcome
