"""
Tests for minicron/proc/daemon.py.

detach() is exercised end to end by the e2e suite; these tests cover its
early exits and failures with the process-level calls patched.
"""

import errno
import signal
from unittest.mock import call, patch

import pytest

from minicron.exceptions import DetachError
from minicron.proc.daemon import DAEMON_UMASK, detach, is_detached


@pytest.mark.unit
class TestIsDetached:
    def test_adopted_by_init(self):
        with patch("os.getppid", return_value=1):
            assert is_detached() is True

    def test_has_parent(self):
        with patch("os.getppid", return_value=4242):
            assert is_detached() is False


@pytest.mark.unit
class TestDetach:
    """Test detach() with fork/setsid patched."""

    def test_noop_when_already_detached(self):
        with patch("os.getppid", return_value=1), patch("os.fork") as mock_fork:
            detach()

        mock_fork.assert_not_called()

    def test_fork_failure(self):
        with patch("os.getppid", return_value=4242), patch("os.umask") as mock_umask, patch(
            "os.fork", side_effect=OSError(errno.EAGAIN, "Resource temporarily unavailable")
        ):
            with pytest.raises(DetachError, match="cannot fork"):
                detach()

        mock_umask.assert_called_once_with(DAEMON_UMASK)

    def test_parent_exits_0(self, lg, log_stream):
        with patch("os.getppid", return_value=4242), patch("os.umask"), patch(
            "os.fork", return_value=777
        ), patch("os._exit", side_effect=SystemExit) as mock_exit:
            with pytest.raises(SystemExit):
                detach(lg)

        mock_exit.assert_called_once_with(0)
        assert "[pid:777]" in log_stream.getvalue()

    def test_setsid_failure(self):
        with patch("os.getppid", return_value=4242), patch("os.umask"), patch(
            "os.fork", return_value=0
        ), patch("os.setsid", side_effect=OSError(errno.EPERM, "Operation not permitted")):
            with pytest.raises(DetachError, match="new session"):
                detach()

    def test_child_side(self):
        with patch("os.getppid", return_value=4242), patch("os.umask"), patch(
            "os.fork", return_value=0
        ), patch("os.setsid") as mock_setsid, patch("signal.signal") as mock_signal, patch(
            "os.closerange"
        ) as mock_closerange, patch(
            "minicron.proc.daemon._redirect_stdio"
        ) as mock_redirect:
            detach()

        mock_setsid.assert_called_once()
        assert mock_signal.call_args_list == [
            call(signal.SIGTSTP, signal.SIG_IGN),
            call(signal.SIGTTIN, signal.SIG_IGN),
            call(signal.SIGTTOU, signal.SIG_IGN),
        ]
        assert mock_closerange.call_args.args[0] == 3
        mock_redirect.assert_called_once()
