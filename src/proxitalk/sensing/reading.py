"""
Value types shared by the sample log, the detector and the sensor sources.
"""
from dataclasses import dataclass
import time


@dataclass(frozen=True)
class Reading:
    """
    One normalized sensor observation.

    Attributes:
        timestamp: Monotonic milliseconds
        distance: Distance estimate (or two-level proxy for light/motion)
        is_near: Thresholded near state
    """
    timestamp: float
    distance: float
    is_near: bool


@dataclass(frozen=True)
class Observation:
    """Raw sample mapped into the shared near/far model."""
    raw_value: float  # Modality units: cm, lux or acceleration magnitude
    distance: float
    is_near: bool


@dataclass(frozen=True)
class GestureEvent:
    """Fired by the detector when enough passes land inside the window."""
    timestamp: float
    event_count: int


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0
