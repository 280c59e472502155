"""Tests for generator handles, range checks and the connect sequence."""

from __future__ import annotations

import pytest

from mcl_ssg.device import SignalGenerator, Ssg6000, SsgXg, read_limits
from mcl_ssg.errors import (
    OutOfRange,
    TransportFailure,
    UnexpectedResponseCode,
    UnsupportedOperation,
    WrongDevice,
)
from mcl_ssg.models import DeviceLimits, DeviceVariant, Status
from mcl_ssg.protocol.commands import Opcode

LIMITS = DeviceLimits(
    min_freq=25_000_000,
    max_freq=6_000_000_000,
    min_power=-75.0,
    max_power=13.0,
)


def _report(*data: int) -> bytes:
    return bytes(data) + b"\x00" * (64 - len(data))


class FakeGenerator:
    """Transport double answering like an SSG-6000."""

    def __init__(self, model: bytes = b"SSG-6000RC"):
        self.responses = {
            Opcode.MODEL_NAME: _report(40, *model),
            Opcode.SERIAL_NUMBER: _report(41, *b"11904150001"),
            Opcode.MIN_FREQUENCY: _report(42, 0x01, 0x7D, 0x78, 0x40),
            Opcode.MAX_FREQUENCY: _report(43, 0x01, 0x65, 0xA0, 0xBC, 0x00),
            Opcode.MIN_POWER: _report(45, 1, 0x1D, 0x4C),
            Opcode.MAX_POWER: _report(46, 0, 0x05, 0x14),
            Opcode.SET_FREQUENCY_POWER: _report(103),
            Opcode.SET_RF_POWER: _report(104),
            Opcode.GET_OUTPUT_STATUS: _report(105, 1, 0, 0, 0, 0, 0x03, 0xE8, 0, 0x01, 0x90),
        }
        self.written: list[bytes] = []
        self.closed = False
        self._pending = b""

    def write(self, data: bytes) -> int:
        self.written.append(bytes(data))
        self._pending = self.responses[data[0]]
        return len(data)

    def read(self) -> bytes:
        return self._pending

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake():
    return FakeGenerator()


@pytest.fixture
def gen(fake):
    return Ssg6000(fake, LIMITS)


# ─── BOOTSTRAP ────────────────────────────────────────────────────────

def test_open_reads_limits(fake):
    gen = Ssg6000.open(fake)
    assert gen.limits == LIMITS
    assert [w[0] for w in fake.written] == [40, 42, 43, 45, 46]
    assert not fake.closed


def test_read_limits(fake):
    assert read_limits(fake) == LIMITS


def test_open_wrong_family_closes_transport():
    fake = FakeGenerator(model=b"SSG-XG6000")
    with pytest.raises(WrongDevice) as exc_info:
        Ssg6000.open(fake)
    assert exc_info.value.model == "SSG-XG6000"
    assert exc_info.value.expected_prefix == "SSG-6000"
    assert fake.closed
    # No limit queries after a failed model check
    assert [w[0] for w in fake.written] == [40]


def test_open_other_family():
    fake = FakeGenerator(model=b"SSG-XG6000")
    gen = SsgXg.open(fake)
    assert gen.variant is DeviceVariant.SSG_XG


def test_open_protocol_error_closes_transport(fake):
    fake.responses[Opcode.MAX_POWER] = _report(45)
    with pytest.raises(UnexpectedResponseCode):
        Ssg6000.open(fake)
    assert fake.closed


def test_generic_handle_requires_variant(fake):
    with pytest.raises(TypeError):
        SignalGenerator(fake, LIMITS)
    with pytest.raises(TypeError):
        SignalGenerator.open(fake)


# ─── GENERIC COMMANDS ─────────────────────────────────────────────────

def test_get_model_name(gen):
    assert gen.get_model_name() == "SSG-6000RC"


def test_get_serial_number(gen):
    assert gen.get_serial_number() == "11904150001"


def test_get_status(gen, fake):
    assert gen.get_status() == Status(enabled=True, locked=False, freq=1000, power=4.0)
    assert fake.written[-1][0] == Opcode.GET_OUTPUT_STATUS


def test_get_status_is_not_cached(gen, fake):
    gen.get_status()
    fake.responses[Opcode.GET_OUTPUT_STATUS] = _report(105, 0, 1, 0, 0, 0, 0, 0x64, 1, 0, 0x32)
    assert gen.get_status() == Status(enabled=False, locked=True, freq=100, power=-0.5)


def test_set_rf_power_on(gen, fake):
    gen.set_rf_power_on(True)
    gen.set_rf_power_on(False)
    assert fake.written[0][:2] == bytes([104, 1])
    assert fake.written[1][:2] == bytes([104, 0])


def test_set_rf_power_transport_failure(gen, fake):
    def fail(data):
        raise TransportFailure("write failed")

    fake.write = fail
    with pytest.raises(TransportFailure):
        gen.set_rf_power_on(True)


def test_limit_accessors_issue_no_transaction(gen, fake):
    assert gen.get_min_freq() == 25_000_000
    assert gen.get_max_freq() == 6_000_000_000
    assert gen.get_min_power() == -75.0
    assert gen.get_max_power() == 13.0
    assert fake.written == []


def test_context_manager_closes(fake):
    with Ssg6000(fake, LIMITS):
        pass
    assert fake.closed


# ─── FREQUENCY / POWER ───────────────────────────────────────────────

def test_set_frequency_power_trigger(gen, fake):
    gen.set_frequency_power_trigger(6_000_000_000, -10.5, True)
    assert fake.written[0][:10] == bytes([103, 0x01, 0x65, 0xA0, 0xBC, 0x00, 1, 0x04, 0x1A, 1])


@pytest.mark.parametrize("freq,power", [
    (25_000_000, -75.0),
    (6_000_000_000, 13.0),
    (25_000_001, -74.99),
    (5_999_999_999, 12.99),
])
def test_set_frequency_power_inside_limits(gen, fake, freq, power):
    gen.set_frequency_power_trigger(freq, power)
    assert len(fake.written) == 1


@pytest.mark.parametrize("freq,power", [
    (24_999_999, 0.0),
    (6_000_000_001, 0.0),
    (1_000_000_000, -75.01),
    (1_000_000_000, 13.01),
    (1_000_000_000, float("nan")),
])
def test_set_frequency_power_out_of_range(gen, fake, freq, power):
    """Out-of-range values are rejected before anything is written."""
    with pytest.raises(OutOfRange):
        gen.set_frequency_power_trigger(freq, power)
    assert fake.written == []


def test_out_of_range_is_value_error():
    assert issubclass(OutOfRange, ValueError)


def test_non_capable_family_has_no_setter(fake):
    gen = SsgXg(fake, LIMITS)
    assert not hasattr(gen, "set_frequency_power_trigger")


def test_capability_guard_rejects_unlisted_variant(fake):
    class Misbound(Ssg6000):
        VARIANT = DeviceVariant.SSG_XG

    gen = Misbound(fake, LIMITS)
    with pytest.raises(UnsupportedOperation):
        gen.set_frequency_power_trigger(1_000_000_000, 0.0)
    assert fake.written == []


def test_set_frequency_power_rejects_fractional_hertz(gen, fake):
    """A fractional frequency inside the limits is rejected, not truncated."""
    with pytest.raises(ValueError) as exc_info:
        gen.set_frequency_power_trigger(1_000_000_000.7, 0.0)
    assert not isinstance(exc_info.value, OutOfRange)
    assert fake.written == []


def test_set_frequency_power_accepts_whole_float(gen, fake):
    gen.set_frequency_power_trigger(1e9, 0.0)
    assert fake.written[0][1:6] == bytes([0x00, 0x3B, 0x9A, 0xCA, 0x00])


def test_open_returns_variant_instance(fake):
    assert type(Ssg6000.open(fake)) is Ssg6000
    assert type(SsgXg.open(FakeGenerator(model=b"SSG-XG6000"))) is SsgXg
