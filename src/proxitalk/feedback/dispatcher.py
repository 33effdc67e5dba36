"""
Fans a detected gesture out to the haptic and speech actuators.
"""
from typing import Iterable, List
import logging

from .errors import ActuatorError

logger = logging.getLogger(__name__)


class FeedbackDispatcher:
    """
    Runs every actuator for a gesture.

    A failing actuator is logged and skipped; it never stops the others and
    never reaches the caller, so detection state is unaffected.
    """

    def __init__(self, actuators: Iterable = ()):
        self._actuators: List = list(actuators)

    @property
    def actuators(self) -> List:
        return list(self._actuators)

    def on_gesture(self, event=None) -> int:
        """
        Trigger all actuators.

        Returns:
            Number of actuators that ran without error.
        """
        ok = 0
        for actuator in self._actuators:
            name = getattr(actuator, "name", type(actuator).__name__)
            try:
                actuator.trigger()
                ok += 1
            except ActuatorError as e:
                logger.warning("Feedback '%s' unavailable: %s", name, e)
            except Exception:
                logger.exception("Feedback '%s' failed", name)
        return ok

    def close(self) -> None:
        for actuator in self._actuators:
            try:
                actuator.close()
            except Exception:
                logger.exception("Error closing feedback '%s'", getattr(actuator, "name", actuator))


def build_feedback(config) -> FeedbackDispatcher:
    """
    Create the actuators enabled in a FeedbackConfig.

    Actuators that cannot be created are logged and left out.
    """
    from .haptics import Rumble

    actuators = []
    if config.vibrate:
        actuators.append(Rumble(duration_ms=config.vibration_ms))

    if config.speak:
        try:
            from .speech import Speaker
            actuators.append(Speaker(config.message, config.speech_rate, config.speech_volume))
        except (ActuatorError, ImportError) as e:
            logger.warning("Speech disabled: %s", e)

    return FeedbackDispatcher(actuators)
