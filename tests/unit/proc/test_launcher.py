"""
Tests for minicron/proc/launcher.py.
"""

import os
import signal
from unittest.mock import call, patch

import pytest

from minicron.proc.launcher import EXIT_EXEC_FAILED, _restore_signals, launch
from minicron.proc.signals import fork
from minicron.task import Task
from tests.fixtures.process import wait_exited


def _exit_code(pid: int) -> int:
    return os.waitstatus_to_exitcode(wait_exited(pid))


@pytest.mark.unit
class TestRestoreSignals:
    """Test the signal reset before exec."""

    def test_resets_handlers_and_unblocks(self):
        with patch("signal.signal") as mock_signal, patch(
            "signal.pthread_sigmask"
        ) as mock_mask:
            _restore_signals()

        mock_signal.assert_any_call(signal.SIGTERM, signal.SIG_DFL)
        mock_signal.assert_any_call(signal.SIGCHLD, signal.SIG_DFL)
        mock_signal.assert_any_call(signal.SIGPIPE, signal.SIG_DFL)
        mock_signal.assert_any_call(signal.SIGXFSZ, signal.SIG_DFL)
        assert mock_signal.call_count == 4
        assert mock_mask.call_args == call(
            signal.SIG_UNBLOCK, (signal.SIGTERM, signal.SIGCHLD)
        )


@pytest.mark.integration
class TestLaunch:
    """Exec real commands in forked processes."""

    def test_argv_passed(self, temp_dir):
        out = temp_dir / "out"
        task = Task.from_command(
            1, "/bin/sh", ["-c", f'printf "%s|%s" "$0" "$1" > {out}', "zero", "-x"]
        )

        assert _exit_code(fork(lambda: launch(task))) == 0
        assert out.read_text() == "zero|-x"

    def test_exit_status_visible(self):
        task = Task.from_command(1, "/bin/sh", ["-c", "exit 3"])

        assert _exit_code(fork(lambda: launch(task))) == 3

    def test_environment_inherited(self, monkeypatch):
        monkeypatch.setenv("MINICRON_TEST_MARKER", "inherited")
        task = Task.from_command(
            1, "/bin/sh", ["-c", 'test "$MINICRON_TEST_MARKER" = inherited']
        )

        assert _exit_code(fork(lambda: launch(task))) == 0

    def test_exec_failure_exits_127(self, temp_dir, capfd, stderr_lg):
        task = Task.from_command(1, str(temp_dir / "no-such-command"))

        assert _exit_code(fork(lambda: launch(task, stderr_lg))) == EXIT_EXEC_FAILED == 127
        assert "cannot execute command" in capfd.readouterr().err

    def test_supervisor_signal_state_not_inherited(self):
        def target():
            signal.signal(signal.SIGTERM, signal.SIG_IGN)
            signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGTERM})
            launch(Task.from_command(1, "/bin/sh", ["-c", "kill -TERM $$; exit 0"]))

        status = wait_exited(fork(target))

        assert os.WIFSIGNALED(status)
        assert os.WTERMSIG(status) == signal.SIGTERM
