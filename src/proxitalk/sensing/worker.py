"""
Background worker that polls the active sensor.
Runs in a separate QThread to avoid blocking the UI.
"""
import time
import logging
from PyQt5.QtCore import QObject, pyqtSignal

from .modality import SensorError
from .session import MonitoringSession

logger = logging.getLogger(__name__)


class MonitorWorker(QObject):
    """
    Worker class that drives the monitoring session loop.
    Emits signals for UI updates.
    """
    # Signals
    started = pyqtSignal(object)           # Emits Modality
    gesture_detected = pyqtSignal(object)  # Emits GestureEvent
    stopped = pyqtSignal()
    error = pyqtSignal(str)

    def __init__(self, session: MonitoringSession, poll_hz: int = 50, parent=None):
        super().__init__(parent)
        self._session = session
        self._poll_hz = max(1, poll_hz)
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start_process(self):
        """Main polling loop. Runs in worker thread at poll_hz."""
        if self._is_running:
            return

        try:
            modality = self._session.start()
        except SensorError as e:
            logger.error("Cannot start monitoring: %s", e)
            self.error.emit(str(e))
            return

        self._is_running = True
        self.started.emit(modality)

        min_interval = 1.0 / self._poll_hz

        try:
            while self._is_running:
                loop_start = time.perf_counter()

                event = self._session.poll()

                if event is not None:
                    self.gesture_detected.emit(event)

                elapsed = time.perf_counter() - loop_start
                sleep_time = min_interval - elapsed
                if sleep_time > 0:
                    time.sleep(sleep_time)

        except Exception as e:
            logger.exception("Monitor worker failed")
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            self._session.stop()
            self.stopped.emit()

    def stop_process(self):
        """Signal the loop to stop; the sensor is released in the worker thread."""
        self._is_running = False
