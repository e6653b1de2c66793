"""Exceptions raised by rhttp."""


class RHTTPError(Exception):
    """Base exception for all rhttp errors."""


class MalformedMessageError(RHTTPError):
    """A raw frame could not be parsed into a request or response."""

    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line


class TransportError(RHTTPError):
    """Publishing or subscribing failed at the transport level."""
