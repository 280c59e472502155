"""Report builder and field codecs for 64-byte USB HID reports.

Report layout::

    +---------+------------------------------------------------+
    | Opcode  |                   Payload                      |
    | 1 byte  |  63 bytes, command specific, zero padded       |
    +---------+------------------------------------------------+

- Opcode: command identifier, echoed by the device in its response
- Integers: big-endian
- Power: 3 bytes, sign byte (1 = negative) + 16-bit magnitude in 0.01 dBm

Field offsets are fixed by the instrument firmware. Minimum frequency is a
4-byte field and maximum frequency a 5-byte field; both widths are part of
the wire format.
"""

from __future__ import annotations

import math
import operator
import struct
from dataclasses import dataclass

from ..errors import InvalidText, MalformedFrame

HID_REPORT_SIZE = 64
MAX_PAYLOAD = HID_REPORT_SIZE - 1

MIN_FREQUENCY_WIDTH = 4
MAX_FREQUENCY_WIDTH = 5
FREQUENCY_WIDTH = 5
POWER_WIDTH = 3


@dataclass
class Frame:
    """A decoded report: opcode plus the 63 payload bytes."""

    opcode: int
    payload: bytes

    def __repr__(self) -> str:
        payload = self.payload.rstrip(b"\x00")
        return (
            f"Frame(opcode={self.opcode} (0x{self.opcode:02X}), "
            f"payload={payload.hex(' ') if payload else '(empty)'})"
        )

    @classmethod
    def from_report(cls, report: bytes) -> Frame:
        if not report:
            raise MalformedFrame("Empty report")
        return cls(opcode=report[0], payload=bytes(report[1:]))


def build_frame(opcode: int, payload: bytes = b"") -> bytes:
    """Build a 64-byte HID report.

    Args:
        opcode: Single-byte command identifier.
        payload: Command-specific bytes placed from offset 1.

    Returns:
        A 64-byte ``bytes`` object, zero padded after the payload.
    """
    if not 0 <= opcode <= 0xFF:
        raise ValueError(f"Opcode must be 0-255, got {opcode}")
    if len(payload) > MAX_PAYLOAD:
        raise ValueError(
            f"Payload must be at most {MAX_PAYLOAD} bytes, got {len(payload)}"
        )
    report = bytearray(HID_REPORT_SIZE)
    report[0] = opcode
    report[1 : 1 + len(payload)] = payload
    return bytes(report)


def _field(report: bytes, offset: int, width: int) -> bytes:
    if len(report) < offset + width:
        raise MalformedFrame(
            f"Report too short: need {offset + width} bytes, got {len(report)}"
        )
    return bytes(report[offset : offset + width])


def decode_string(report: bytes) -> str:
    """Decode the null-terminated UTF-8 string starting at offset 1."""
    null_idx = bytes(report).find(b"\x00", 1)
    if null_idx < 0:
        raise MalformedFrame("String field has no null terminator")
    try:
        return bytes(report[1:null_idx]).decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidText(f"Could not parse string: {e}") from e


def decode_frequency(data: bytes) -> int:
    """Decode a 5-byte big-endian frequency field (Hz)."""
    return int.from_bytes(_field(data, 0, FREQUENCY_WIDTH), "big")


def decode_min_frequency(report: bytes) -> int:
    """Decode the minimum frequency response (4 bytes at offset 1)."""
    return int.from_bytes(_field(report, 1, MIN_FREQUENCY_WIDTH), "big")


def decode_max_frequency(report: bytes) -> int:
    """Decode the maximum frequency response (5 bytes at offset 1)."""
    return int.from_bytes(_field(report, 1, MAX_FREQUENCY_WIDTH), "big")


def decode_power(data: bytes) -> float:
    """Decode a 3-byte sign-magnitude power field to dBm."""
    sign, hi, lo = _field(data, 0, POWER_WIDTH)
    if sign not in (0, 1):
        raise MalformedFrame(f"Invalid power sign byte {sign}")
    magnitude = 256 * hi + lo
    return (-1.0 if sign else 1.0) * magnitude / 100.0


def _to_byte(value: float) -> int:
    # Saturating cast: truncate toward zero, clamp to 0-255
    return min(max(math.trunc(value), 0), 0xFF)


def _f32(value: float) -> float:
    """Round to the nearest single-precision float."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def encode_power(power: float) -> bytes:
    """Encode dBm as sign byte + high + low magnitude bytes.

    The instrument software computes this in single precision: scale by
    100, truncate the high part, then subtract it to get the low part.
    Every intermediate here is rounded to single precision in the same
    order so the frames match byte for byte.
    """
    if not math.isfinite(power):
        raise ValueError(f"Power must be finite, got {power}")
    try:
        scaled = _f32(abs(_f32(power)) * 100.0)
        hi = math.trunc(_f32(scaled / 256.0))
        lo = _f32(scaled - _f32(hi * 256.0))
    except OverflowError as e:
        raise ValueError(f"Power out of single-precision range: {power}") from e
    return bytes([1 if power < 0 else 0, _to_byte(hi), _to_byte(lo)])


def encode_frequency(freq: int) -> bytes:
    """Encode Hz as the low 5 bytes of its 64-bit big-endian form.

    Raises:
        ValueError: If the value has a fractional part or does not fit
            in 64 unsigned bits.
        TypeError: If the value is not a number of whole hertz.
    """
    if isinstance(freq, float):
        if not freq.is_integer():
            raise ValueError(f"Frequency must be whole hertz, got {freq}")
        freq = int(freq)
    freq = operator.index(freq)
    if not 0 <= freq < 1 << 64:
        raise ValueError(f"Frequency must be a 64-bit unsigned value, got {freq}")
    return freq.to_bytes(8, "big")[8 - FREQUENCY_WIDTH :]
