"""Generator status and capability limit models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum


class DeviceVariant(Enum):
    """Hardware families, valued by their model-name prefix."""

    SSG_6000 = "SSG-6000"
    SSG_XG = "SSG-XG"

    @property
    def prefix(self) -> str:
        return self.value


@dataclass
class Status:
    """Output status snapshot."""

    enabled: bool
    locked: bool
    freq: int  # Hz
    power: float  # dBm

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DeviceLimits:
    """Frequency and power bounds reported by the device at connect time."""

    min_freq: int
    max_freq: int
    min_power: float
    max_power: float

    def contains_frequency(self, freq: int) -> bool:
        return self.min_freq <= freq <= self.max_freq

    def contains_power(self, power: float) -> bool:
        # NaN fails both comparisons
        return self.min_power <= power <= self.max_power

    def to_dict(self) -> dict:
        return asdict(self)
