"""Signal generator handles.

``SignalGenerator`` implements the command set shared by every SSG model.
Frequency/power programming is only available on families listed in
``FREQUENCY_POWER_VARIANTS`` and lives in the ``FrequencyPowerControl``
mixin, so handles of other families do not expose the method at all.

Usage::

    with Ssg6000.open() as gen:
        gen.set_frequency_power_trigger(1_000_000_000, -10.0)
        gen.set_rf_power_on(True)
        print(gen.get_status())
"""

from __future__ import annotations

import logging
from typing import ClassVar, TypeVar

from .errors import OutOfRange, UnsupportedOperation, WrongDevice
from .models.status import DeviceLimits, DeviceVariant, Status
from .protocol.commands import (
    build_get_max_frequency,
    build_get_max_power,
    build_get_min_frequency,
    build_get_min_power,
    build_get_model_name,
    build_get_serial_number,
    build_get_status,
    build_set_frequency_power,
    build_set_rf_power,
)
from .protocol.parser import (
    parse_max_frequency,
    parse_max_power,
    parse_min_frequency,
    parse_min_power,
    parse_model_name,
    parse_serial_number,
    parse_status,
)
from .protocol.transaction import Transport, execute

logger = logging.getLogger(__name__)

FREQUENCY_POWER_VARIANTS = frozenset({DeviceVariant.SSG_6000})

_G = TypeVar("_G", bound="SignalGenerator")


def read_model_name(transport: Transport) -> str:
    return parse_model_name(execute(transport, build_get_model_name()))


def read_limits(transport: Transport) -> DeviceLimits:
    """Query the four capability limits (one transaction each)."""
    return DeviceLimits(
        min_freq=parse_min_frequency(execute(transport, build_get_min_frequency())),
        max_freq=parse_max_frequency(execute(transport, build_get_max_frequency())),
        min_power=parse_min_power(execute(transport, build_get_min_power())),
        max_power=parse_max_power(execute(transport, build_get_max_power())),
    )


class SignalGenerator:
    """Connected generator with cached capability limits.

    Not thread safe: a handle owns its transport and runs one
    transaction at a time.
    """

    VARIANT: ClassVar[DeviceVariant | None] = None

    def __init__(self, transport: Transport, limits: DeviceLimits) -> None:
        if not isinstance(self.VARIANT, DeviceVariant):
            raise TypeError(
                f"{type(self).__name__} is not bound to a hardware variant"
            )
        self._transport = transport
        self._limits = limits

    @classmethod
    def open(cls: type[_G], transport: Transport | None = None) -> _G:
        """Connect to a generator of this class's family.

        Opens the default HID connection when no transport is given, checks
        the model name prefix, then caches the device limits.

        Raises:
            WrongDevice: If the model name belongs to another family.
        """
        if not isinstance(cls.VARIANT, DeviceVariant):
            raise TypeError(f"{cls.__name__} is not bound to a hardware variant")

        if transport is None:
            from .transport.usb_connection import HIDConnection

            transport = HIDConnection()
            transport.open()

        try:
            model = read_model_name(transport)
            if not model.startswith(cls.VARIANT.prefix):
                raise WrongDevice(model, cls.VARIANT.prefix)
            limits = read_limits(transport)
        except Exception:
            _close(transport)
            raise

        logger.info(
            "Opened %s: %d-%d Hz, %.2f to %.2f dBm",
            model,
            limits.min_freq,
            limits.max_freq,
            limits.min_power,
            limits.max_power,
        )
        return cls(transport, limits)

    @property
    def variant(self) -> DeviceVariant:
        return self.VARIANT

    @property
    def limits(self) -> DeviceLimits:
        return self._limits

    def close(self) -> None:
        _close(self._transport)

    def __enter__(self: _G) -> _G:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(limits={self._limits!r})"

    def get_model_name(self) -> str:
        """Get the connected generator's model name."""
        return read_model_name(self._transport)

    def get_serial_number(self) -> str:
        """Get the connected generator's serial number."""
        return parse_serial_number(execute(self._transport, build_get_serial_number()))

    def get_status(self) -> Status:
        """Get the output status of the signal generator."""
        return parse_status(execute(self._transport, build_get_status()))

    def set_rf_power_on(self, enabled: bool) -> None:
        """Enable or disable the RF output."""
        execute(self._transport, build_set_rf_power(enabled))

    def get_min_freq(self) -> int:
        """Minimum supported frequency in Hz."""
        return self._limits.min_freq

    def get_max_freq(self) -> int:
        """Maximum supported frequency in Hz."""
        return self._limits.max_freq

    def get_min_power(self) -> float:
        """Minimum supported power in dBm."""
        return self._limits.min_power

    def get_max_power(self) -> float:
        """Maximum supported power in dBm."""
        return self._limits.max_power


class FrequencyPowerControl:
    """Frequency and power programming for capable families."""

    VARIANT: ClassVar[DeviceVariant | None]
    _limits: DeviceLimits
    _transport: Transport

    def set_frequency_power_trigger(
        self, freq: int, power: float, trigger: bool = False
    ) -> None:
        """Set the RF output frequency (Hz), power (dBm) and trigger out.

        Raises:
            UnsupportedOperation: If the handle's family cannot program
                frequency and power.
            OutOfRange: If either value is outside the cached limits.
                Nothing is sent in that case.
            ValueError: If the frequency is not a whole number of hertz.
        """
        if self.VARIANT not in FREQUENCY_POWER_VARIANTS:
            raise UnsupportedOperation(
                f"{self.VARIANT} does not support frequency/power programming"
            )
        limits = self._limits
        if not limits.contains_frequency(freq):
            raise OutOfRange(
                f"Frequency {freq} Hz outside {limits.min_freq}-{limits.max_freq} Hz"
            )
        if not limits.contains_power(power):
            raise OutOfRange(
                f"Power {power} dBm outside {limits.min_power} to {limits.max_power} dBm"
            )
        execute(self._transport, build_set_frequency_power(freq, power, trigger))


class Ssg6000(FrequencyPowerControl, SignalGenerator):
    """SSG-6000 series generator."""

    VARIANT = DeviceVariant.SSG_6000


class SsgXg(SignalGenerator):
    """SSG-XG series generator (no frequency/power programming)."""

    VARIANT = DeviceVariant.SSG_XG


def _close(transport) -> None:
    close = getattr(transport, "close", None)
    if close is not None:
        close()
