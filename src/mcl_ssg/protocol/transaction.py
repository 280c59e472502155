"""Single write-then-read exchange with opcode echo validation."""

from __future__ import annotations

import logging
from typing import Protocol

from ..errors import TransportFailure, UnexpectedResponseCode
from .framing import HID_REPORT_SIZE, Frame

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Byte transport for 64-byte HID reports."""

    def write(self, data: bytes) -> object:
        """Send one report. Raises TransportFailure on error."""
        ...

    def read(self) -> bytes:
        """Receive one report. Raises TransportFailure on error or timeout."""
        ...


def execute(transport: Transport, report: bytes) -> bytes:
    """Write ``report`` and read the device's response.

    Args:
        transport: Open transport; one transaction at a time.
        report: A 64-byte request report.

    Returns:
        The 64-byte response report, opcode already validated.

    Raises:
        TransportFailure: If the write or read fails.
        UnexpectedResponseCode: If the response opcode differs from the
            request opcode. The response is not decoded and no retry is made.
    """
    opcode = report[0]
    logger.debug("-> opcode %d (0x%02X)", opcode, opcode)

    try:
        transport.write(report)
    except TransportFailure:
        raise
    except OSError as e:
        raise TransportFailure(f"Write failed: {e}") from e

    try:
        response = transport.read()
    except TransportFailure:
        raise
    except OSError as e:
        raise TransportFailure(f"Read failed: {e}") from e

    if not response:
        raise TransportFailure("No response from device")
    response = bytes(response[:HID_REPORT_SIZE])
    if len(response) < HID_REPORT_SIZE:
        response += b"\x00" * (HID_REPORT_SIZE - len(response))

    if response[0] != opcode:
        logger.debug("<- opcode %d (0x%02X), expected %d", response[0], response[0], opcode)
        raise UnexpectedResponseCode(opcode, response[0])

    logger.debug("<- %r", Frame.from_report(response))
    return response
