"""Exceptions raised by the SSG protocol layer."""

from __future__ import annotations


class SsgError(Exception):
    """Base exception for signal generator errors."""


class TransportFailure(SsgError):
    """The HID transport failed to write or read a report."""


class UnexpectedResponseCode(SsgError):
    """The response opcode does not echo the request opcode."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"HID interrupt returned code {actual} (0x{actual:02X}), "
            f"expected {expected} (0x{expected:02X})"
        )


class MalformedFrame(SsgError):
    """A response report could not be decoded."""


class InvalidText(MalformedFrame):
    """A string field was not valid UTF-8."""


class WrongDevice(SsgError):
    """The connected generator belongs to a different model family."""

    def __init__(self, model: str, expected_prefix: str) -> None:
        self.model = model
        self.expected_prefix = expected_prefix
        super().__init__(
            f"Connected device {model!r} is not a {expected_prefix} generator"
        )


class OutOfRange(SsgError, ValueError):
    """Requested value lies outside the limits reported by the device."""


class UnsupportedOperation(SsgError):
    """The command is not available on this hardware family."""
