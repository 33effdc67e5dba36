"""
Gesture detection from a near/far observation stream.
Fires when enough close passes land inside a rolling time window.
"""
from enum import Enum, auto
from typing import List, Optional
import logging
import math

from .reading import GestureEvent

logger = logging.getLogger(__name__)


class DetectorPhase(Enum):
    """Diagnostic view of the detector state."""
    IDLE = auto()           # No pending passes
    ACCUMULATING = auto()   # Some passes inside the window, not enough yet
    COOLDOWN = auto()       # Recently fired, new passes are suppressed


class GestureDetector:
    """
    Windowed-event state machine for "close pass" gestures.

    A pass is a far->near transition that is not noise. Passes are
    timestamped and kept only while they are inside the window. When the
    window holds ``required_events`` passes the gesture fires, the history
    is cleared, and passes are ignored until ``cooldown_ms`` has elapsed.

    Cooldown only suppresses new passes; it never clears passes that were
    already accumulated. All timing is driven by the caller's timestamps,
    nothing is scheduled.
    """

    def __init__(
        self,
        significance_threshold: float,
        window_ms: float = 2000,
        required_events: int = 3,
        cooldown_ms: float = 2000,
    ):
        """
        Args:
            significance_threshold: Minimum raw delta that counts as a change
            window_ms: Rolling window length
            required_events: Passes needed inside the window
            cooldown_ms: Minimum spacing between two gestures
        """
        if required_events < 1:
            raise ValueError(f"required_events must be >= 1, got {required_events}")
        if window_ms <= 0:
            raise ValueError(f"window_ms must be > 0, got {window_ms}")
        if cooldown_ms < 0:
            raise ValueError(f"cooldown_ms must be >= 0, got {cooldown_ms}")

        self._threshold = significance_threshold
        self._window_ms = window_ms
        self._required_events = required_events
        self._cooldown_ms = cooldown_ms

        self._events: List[float] = []
        self._last_gesture_time: Optional[float] = None
        self._last_is_near: Optional[bool] = None  # None = unknown
        self._last_raw_value: Optional[float] = None

    @property
    def significance_threshold(self) -> float:
        return self._threshold

    @property
    def window_ms(self) -> float:
        return self._window_ms

    @property
    def required_events(self) -> int:
        return self._required_events

    @property
    def cooldown_ms(self) -> float:
        return self._cooldown_ms

    @property
    def pending_events(self) -> List[float]:
        return list(self._events)

    @property
    def last_gesture_time(self) -> Optional[float]:
        return self._last_gesture_time

    def reset(self) -> None:
        """Forget history, cooldown and last-seen state."""
        self._events.clear()
        self._last_gesture_time = None
        self._last_is_near = None
        self._last_raw_value = None

    def observe(self, timestamp: float, raw_value: float, is_near: bool) -> Optional[GestureEvent]:
        """
        Feed one observation.

        Returns:
            GestureEvent if this observation completed a gesture, else None.
        """
        if not (math.isfinite(timestamp) and math.isfinite(raw_value)):
            return None

        is_near = bool(is_near)
        event = None
        if self._is_significant(raw_value, is_near) and is_near and not self._last_is_near:
            event = self._handle_pass(timestamp)

        self._last_is_near = is_near
        self._last_raw_value = raw_value
        return event

    def phase(self, now: float) -> DetectorPhase:
        if self._in_cooldown(now):
            return DetectorPhase.COOLDOWN
        cutoff = now - self._window_ms
        if any(t >= cutoff for t in self._events):
            return DetectorPhase.ACCUMULATING
        return DetectorPhase.IDLE

    def _is_significant(self, raw_value: float, is_near: bool) -> bool:
        if self._last_raw_value is None:
            return True
        if is_near != self._last_is_near:
            return True
        return abs(raw_value - self._last_raw_value) > self._threshold

    def _in_cooldown(self, now: float) -> bool:
        if self._last_gesture_time is None:
            return False
        return now - self._last_gesture_time < self._cooldown_ms

    def _handle_pass(self, now: float) -> Optional[GestureEvent]:
        if self._in_cooldown(now):
            logger.debug("Pass at %.0f ms suppressed by cooldown", now)
            return None

        self._events.append(now)
        cutoff = now - self._window_ms
        self._events = [t for t in self._events if t >= cutoff]
        logger.debug("Pass at %.0f ms, %d in window", now, len(self._events))

        if len(self._events) < self._required_events:
            return None

        event = GestureEvent(timestamp=now, event_count=len(self._events))
        self._last_gesture_time = now
        self._events.clear()
        logger.info("Gesture detected at %.0f ms (%d passes)", now, event.event_count)
        return event
