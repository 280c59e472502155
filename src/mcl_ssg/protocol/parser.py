"""Response parsing for device reports.

Callers pass the raw 64-byte response after the transaction layer has
confirmed the opcode echo.
"""

from __future__ import annotations

from ..models.status import Status
from .framing import (
    FREQUENCY_WIDTH,
    POWER_WIDTH,
    decode_frequency,
    decode_max_frequency,
    decode_min_frequency,
    decode_power,
    decode_string,
)

# Output status report offsets
OFF_STATUS_ENABLED = 1
OFF_STATUS_LOCKED = 2
OFF_STATUS_FREQ = 3        # 5 bytes
OFF_STATUS_POWER = 8       # 3 bytes

# Limit power responses carry the value right after the opcode
OFF_LIMIT_POWER = 1


def parse_model_name(report: bytes) -> str:
    return decode_string(report)


def parse_serial_number(report: bytes) -> str:
    return decode_string(report)


def parse_min_frequency(report: bytes) -> int:
    return decode_min_frequency(report)


def parse_max_frequency(report: bytes) -> int:
    return decode_max_frequency(report)


def parse_min_power(report: bytes) -> float:
    return decode_power(report[OFF_LIMIT_POWER : OFF_LIMIT_POWER + POWER_WIDTH])


def parse_max_power(report: bytes) -> float:
    return decode_power(report[OFF_LIMIT_POWER : OFF_LIMIT_POWER + POWER_WIDTH])


def parse_status(report: bytes) -> Status:
    """Parse a generator output status response.

    The response payload holds the RF enabled flag, the reference lock
    flag, a 5-byte frequency in Hz and a 3-byte power in dBm.
    """
    freq = decode_frequency(
        report[OFF_STATUS_FREQ : OFF_STATUS_FREQ + FREQUENCY_WIDTH]
    )
    power = decode_power(report[OFF_STATUS_POWER : OFF_STATUS_POWER + POWER_WIDTH])
    return Status(
        enabled=report[OFF_STATUS_ENABLED] != 0,
        locked=report[OFF_STATUS_LOCKED] != 0,
        freq=freq,
        power=power,
    )
