"""Opcode constants and command builders.

Each command is identified by a single-byte opcode used for both
host-to-device requests and the device-to-host response that echoes it.
"""

from __future__ import annotations

from enum import IntEnum

from .framing import build_frame, encode_frequency, encode_power


class Opcode(IntEnum):
    """HID interrupt codes."""

    MODEL_NAME = 40
    SERIAL_NUMBER = 41
    MIN_FREQUENCY = 42
    MAX_FREQUENCY = 43
    MIN_POWER = 45
    MAX_POWER = 46
    SET_FREQUENCY_POWER = 103
    SET_RF_POWER = 104
    GET_OUTPUT_STATUS = 105


def build_command(opcode: Opcode, payload: bytes = b"") -> bytes:
    """Build a single 64-byte HID report for a command."""
    return build_frame(opcode.value, payload)


def build_get_model_name() -> bytes:
    return build_command(Opcode.MODEL_NAME)


def build_get_serial_number() -> bytes:
    return build_command(Opcode.SERIAL_NUMBER)


def build_get_min_frequency() -> bytes:
    return build_command(Opcode.MIN_FREQUENCY)


def build_get_max_frequency() -> bytes:
    return build_command(Opcode.MAX_FREQUENCY)


def build_get_min_power() -> bytes:
    return build_command(Opcode.MIN_POWER)


def build_get_max_power() -> bytes:
    return build_command(Opcode.MAX_POWER)


def build_get_status() -> bytes:
    """Build a generator output status query."""
    return build_command(Opcode.GET_OUTPUT_STATUS)


def build_set_rf_power(enabled: bool) -> bytes:
    """Build a command to switch the RF output on or off."""
    return build_command(Opcode.SET_RF_POWER, bytes([1 if enabled else 0]))


def build_set_frequency_power(freq: int, power: float, trigger: bool) -> bytes:
    """Build a combined frequency, power and trigger-out command.

    Payload layout (report offsets)::

        1..6   frequency, 5 bytes big-endian (Hz)
        6..9   power, 3-byte sign-magnitude (0.01 dBm)
        9      trigger out flag

    No range check happens here; callers validate against device limits.
    """
    payload = encode_frequency(freq) + encode_power(power) + bytes([1 if trigger else 0])
    return build_command(Opcode.SET_FREQUENCY_POWER, payload)
