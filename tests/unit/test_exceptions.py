"""
Tests for minicron/exceptions.py.
"""

import pytest

from minicron.exceptions import (
    ConfigError,
    DetachError,
    MinicronError,
    PidFileError,
    UsageError,
)
from minicron.log import InvalidLogLevelError, LogError


@pytest.mark.unit
class TestMinicronError:
    """Test the base exception."""

    def test_message_only(self):
        e = MinicronError("something failed")

        assert str(e) == "something failed"
        assert e.context == {}

    def test_context_rendered(self):
        e = MinicronError("cannot create PID file", path="/run/x.pid", error="EACCES")

        assert str(e) == "cannot create PID file (path=/run/x.pid, error=EACCES)"
        assert e.message == "cannot create PID file"


@pytest.mark.unit
class TestHierarchy:
    """Every package error derives from MinicronError."""

    @pytest.mark.parametrize(
        "cls", [ConfigError, PidFileError, DetachError, LogError]
    )
    def test_subclasses(self, cls):
        assert issubclass(cls, MinicronError)

    def test_usage_error_carries_exit_code(self):
        e = UsageError("unrecognized arguments: -x", exit_code=12)

        assert e.exit_code == 12
        assert isinstance(e, MinicronError)

    def test_invalid_log_level(self):
        e = InvalidLogLevelError("loud")

        assert e.level == "loud"
        assert "loud" in str(e)
