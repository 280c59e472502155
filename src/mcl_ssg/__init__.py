"""Control library for Mini-Circuits SSG USB signal generators."""

from .device import SignalGenerator, Ssg6000, SsgXg
from .errors import (
    InvalidText,
    MalformedFrame,
    OutOfRange,
    SsgError,
    TransportFailure,
    UnexpectedResponseCode,
    UnsupportedOperation,
    WrongDevice,
)
from .models import DeviceLimits, DeviceVariant, Status
