"""
Monitoring session: sensor source -> sample log + gesture detector.
"""
from typing import Callable, List, Optional
import logging

from .backends import SensorBackend
from .config import Config
from .gesture_detector import GestureDetector
from .modality import Modality
from .reading import GestureEvent, Observation, Reading, monotonic_ms
from .sample_log import SampleLog
from .sensor_source import SensorSourceSelector

logger = logging.getLogger(__name__)

GestureListener = Callable[[GestureEvent], None]


class MonitoringSession:
    """
    Single-producer pipeline for one sensor stream.

    Every normalized sample is appended to the log and fed to the detector.
    Calls must come from one thread at a time; the log itself may be read
    from any thread.
    """

    def __init__(self, backend: SensorBackend, config: Config,
                 clock: Callable[[], float] = monotonic_ms):
        self._config = config
        self._clock = clock
        self.selector = SensorSourceSelector(backend, config.sensor)
        self.log = SampleLog(config.log.max_points, config.log.max_age_ms, clock=clock)
        self.detector: Optional[GestureDetector] = None
        self.last_gesture: Optional[GestureEvent] = None
        self._listeners: List[GestureListener] = []
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def modality(self) -> Modality:
        return self.selector.modality

    def add_gesture_listener(self, listener: GestureListener) -> None:
        self._listeners.append(listener)

    def start(self) -> Modality:
        """
        Select a sensor and reset detection.

        Raises:
            NoSensorAvailable: propagated from the selector
        """
        modality = self.selector.select_and_start()
        self.detector = self._build_detector(modality)
        self.detector.reset()
        self._running = True
        logger.info("Monitoring started with %s", self.selector.describe())
        return modality

    def stop(self) -> None:
        if self._running:
            logger.info("Monitoring stopped")
        self._running = False
        self.selector.stop()

    def poll(self) -> Optional[GestureEvent]:
        """Read one sample from the active sensor and process it now."""
        if not self._running:
            return None
        return self.handle(self._clock(), self.selector.read())

    def handle(self, timestamp: float, observation: Optional[Observation]) -> Optional[GestureEvent]:
        """Log and classify one observation; malformed samples are skipped."""
        if observation is None or self.detector is None:
            return None

        self.log.append(Reading(timestamp, observation.distance, observation.is_near))
        event = self.detector.observe(timestamp, observation.raw_value, observation.is_near)
        if event is not None:
            self.last_gesture = event
            self._notify(event)
        return event

    def _build_detector(self, modality: Modality) -> GestureDetector:
        gestures = self._config.gestures
        thresholds = {
            Modality.PROXIMITY: gestures.significance_proximity,
            Modality.LIGHT: gestures.significance_light,
            Modality.MOTION: gestures.significance_motion,
        }
        return GestureDetector(
            significance_threshold=thresholds[modality],
            window_ms=gestures.window_ms,
            required_events=gestures.required_events,
            cooldown_ms=gestures.cooldown_ms,
        )

    def _notify(self, event: GestureEvent) -> None:
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Gesture listener %r failed", listener)
