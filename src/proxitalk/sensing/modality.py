"""
Sensor modalities and sensor errors.
"""
from enum import Enum, auto


class Modality(Enum):
    """Physical sensor currently driving observations."""
    PROXIMITY = auto()  # Distance sensor
    LIGHT = auto()      # Ambient light, covered = near
    MOTION = auto()     # Accelerometer, shake = near
    NONE = auto()


# Probe order when monitoring starts
PRIORITY = (Modality.PROXIMITY, Modality.LIGHT, Modality.MOTION)


class SensorError(RuntimeError):
    """Base class for sensor source failures."""


class NoSensorAvailable(SensorError):
    """No distance, light or motion sensor could be activated."""

    def __init__(self, message: str = "No sensor available (proximity, light or motion)"):
        super().__init__(message)
