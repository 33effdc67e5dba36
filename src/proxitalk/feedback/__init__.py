"""
ProxiTalk Feedback Module

Haptic and spoken confirmation of detected gestures.
"""
from .errors import ActuatorError
from .haptics import Rumble, find_rumble_device
from .dispatcher import FeedbackDispatcher, build_feedback

__all__ = [
    'ActuatorError',
    'Rumble',
    'find_rumble_device',
    'FeedbackDispatcher',
    'build_feedback',
]
