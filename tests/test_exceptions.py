"""Tests for rhttp exceptions."""

import pytest

from rhttp.exceptions import MalformedMessageError, RHTTPError, TransportError


class TestMalformedMessageError:
    def test_inherits_from_base(self):
        assert issubclass(MalformedMessageError, RHTTPError)

    def test_keeps_offending_line(self):
        error = MalformedMessageError("invalid request line", line="GET")
        assert str(error) == "invalid request line"
        assert error.line == "GET"

    def test_line_defaults_to_none(self):
        assert MalformedMessageError("empty frame").line is None


def test_transport_error_caught_as_base():
    with pytest.raises(RHTTPError):
        raise TransportError("broker is closed")
