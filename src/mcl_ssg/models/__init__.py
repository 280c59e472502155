"""Data models for generator status, limits and hardware variants."""

from .status import DeviceLimits, DeviceVariant, Status
