"""
Tests for minicron/cli/args.py.
"""

import pytest

from minicron.cli.args import (
    EXIT_BAD_OPTION,
    EXIT_TOO_FEW_ARGUMENTS,
    build_parser,
    parse_args,
)
from minicron.exceptions import UsageError


@pytest.mark.unit
class TestParseArgs:
    """Test building a Task from the command line."""

    def test_minimal(self):
        task = parse_args(["300", "/usr/local/bin/backup"])

        assert task.period == 300.0
        assert task.executable == "/usr/local/bin/backup"
        assert task.argv == ("/usr/local/bin/backup",)
        assert task.kill_after == 0
        assert task.child_pidfile is None
        assert task.daemon_pidfile is None
        assert task.detach is False

    def test_all_options_attached(self):
        task = parse_args(
            ["-p/run/job.pid", "-P/run/minicron.pid", "-k30", "-d", "60", "/bin/job"]
        )

        assert task.child_pidfile == "/run/job.pid"
        assert task.daemon_pidfile == "/run/minicron.pid"
        assert task.kill_after == 30.0
        assert task.detach is True

    def test_options_separate(self):
        task = parse_args(["-p", "/run/job.pid", "-k", "5", "60", "/bin/job"])

        assert task.child_pidfile == "/run/job.pid"
        assert task.kill_after == 5.0

    def test_arguments_passed_verbatim(self):
        task = parse_args(["5", "/bin/echo", "hello", "-n", "-p", "x", "--", "-k"])

        assert task.argv == ("/bin/echo", "hello", "-n", "-p", "x", "--", "-k")

    @pytest.mark.parametrize(
        "argv,expected",
        [
            (["5", "/bin/echo", "--", "x"], ("/bin/echo", "--", "x")),
            (["60", "/bin/rm", "--", "-f"], ("/bin/rm", "--", "-f")),
            (["60", "/bin/job", "--"], ("/bin/job", "--")),
            (["--", "60", "/bin/job", "-p"], ("/bin/job", "-p")),
        ],
    )
    def test_double_dash_after_command_kept(self, argv, expected):
        assert parse_args(argv).argv == expected

    def test_command_options_not_taken_as_own(self):
        task = parse_args(["-k", "5", "60", "/bin/job", "-k", "9", "-d", "-P/x"])

        assert task.kill_after == 5.0
        assert task.detach is False
        assert task.daemon_pidfile is None
        assert task.argv == ("/bin/job", "-k", "9", "-d", "-P/x")

    def test_bundled_flags(self):
        task = parse_args(["-dk", "5", "60", "/bin/job", "--", "x"])

        assert task.detach is True
        assert task.kill_after == 5.0
        assert task.argv == ("/bin/job", "--", "x")

    def test_duration_strings(self):
        task = parse_args(["-k", "1m30s", "1h", "/bin/job"])

        assert task.period == 3600.0
        assert task.kill_after == 90.0

    def test_zero_period(self):
        assert parse_args(["0", "/bin/true"]).period == 0


@pytest.mark.unit
class TestUsageErrors:
    """Test exit codes of rejected command lines."""

    @pytest.mark.parametrize(
        "argv",
        [[], ["60"], ["-d", "60"], ["-k", "5", "60"]],
    )
    def test_too_few_arguments(self, argv):
        with pytest.raises(UsageError) as exc_info:
            parse_args(argv)

        assert exc_info.value.exit_code == EXIT_TOO_FEW_ARGUMENTS == 11

    @pytest.mark.parametrize(
        "argv",
        [
            ["-x", "60", "/bin/job"],
            ["--verbose", "60", "/bin/job"],
            ["soon", "/bin/job"],
            ["-1", "/bin/job"],
            ["-kforever", "60", "/bin/job"],
        ],
    )
    def test_bad_option_or_value(self, argv):
        with pytest.raises(UsageError) as exc_info:
            parse_args(argv)

        assert exc_info.value.exit_code == EXIT_BAD_OPTION == 12

    def test_help_lists_every_flag(self):
        text = build_parser().format_help()

        for flag in ("-p", "-P", "-k", "-d", "period", "command"):
            assert flag in text
