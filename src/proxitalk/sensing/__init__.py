"""
ProxiTalk Sensing Module

Sensor source selection, sample log and close-pass gesture detection.
"""
from .config import Config, load_config
from .reading import Reading, Observation, GestureEvent, monotonic_ms
from .modality import Modality, SensorError, NoSensorAvailable
from .sample_log import SampleLog
from .gesture_detector import GestureDetector, DetectorPhase
from .backends import create_backend
from .sensor_source import SensorSourceSelector
from .session import MonitoringSession

__all__ = [
    'Config',
    'load_config',
    'Reading',
    'Observation',
    'GestureEvent',
    'monotonic_ms',
    'Modality',
    'SensorError',
    'NoSensorAvailable',
    'SampleLog',
    'GestureDetector',
    'DetectorPhase',
    'create_backend',
    'SensorSourceSelector',
    'MonitoringSession',
]
