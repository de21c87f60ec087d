"""
Process hierarchy: scheduler, supervisor and child.

    Scheduler ──fork──> Supervisor ──fork──> child (exec command)
        │  sleep(period)      │  sleep(kill_after) or wait
        └── terminate(0) ───> └── terminate(child grace)

Modules:
    pidfile    PID file write/remove/read and a scoped pid_file()
    escalate   SIGTERM -> grace -> SIGKILL termination protocol
    handle     ProcessHandle (pid + role)
    launcher   exec of the task command in the forked child
    supervisor one supervised run of the task
    scheduler  the periodic control loop
    daemon     detaching from the controlling terminal
"""

from .daemon import detach
from .escalate import Termination, has_exited, terminate
from .handle import ProcessHandle, Role
from .launcher import EXIT_EXEC_FAILED, launch
from .pidfile import pid_file, read_pid, remove_pid, write_pid
from .scheduler import Scheduler, TerminationRequested
from .supervisor import Supervisor

__all__ = [
    "EXIT_EXEC_FAILED",
    "ProcessHandle",
    "Role",
    "Scheduler",
    "Supervisor",
    "Termination",
    "TerminationRequested",
    "detach",
    "has_exited",
    "launch",
    "pid_file",
    "read_pid",
    "remove_pid",
    "terminate",
    "write_pid",
]
