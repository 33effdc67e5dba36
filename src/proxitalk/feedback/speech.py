"""
Spoken announcements with pyttsx3.
"""
from typing import Optional
import logging
import queue
import threading

import pyttsx3

from .errors import ActuatorError

logger = logging.getLogger(__name__)


class Speaker:
    """
    Speaks a fixed message on a background thread.

    Only the most recent request is kept; a backlog is dropped so the
    announcement always matches the latest gesture.
    """

    name = "speech"

    def __init__(self, message: str, rate: int = 175, volume: float = 1.0, engine=None):
        self.message = message
        if engine is None:
            try:
                engine = pyttsx3.init()
                engine.setProperty("rate", rate)
                engine.setProperty("volume", volume)
            except Exception as e:
                raise ActuatorError(f"Text to speech unavailable: {e}") from e
        self.engine = engine

        self._q: "queue.Queue[str]" = queue.Queue()
        self._stop = threading.Event()
        self._t = threading.Thread(target=self._run, name="speaker", daemon=True)
        self._t.start()

    def _run(self):
        while not self._stop.is_set():
            try:
                text = self._q.get(timeout=0.2)
            except queue.Empty:
                continue

            try:
                self.engine.say(text)
                self.engine.runAndWait()
            except Exception as e:
                logger.error("TTS error: %s", e)

    def speak(self, text: Optional[str] = None) -> None:
        """Queue ``text`` (or the configured message)."""
        if self._stop.is_set():
            raise ActuatorError("Speaker is closed")

        while not self._q.empty():
            try:
                self._q.get_nowait()
            except queue.Empty:
                break

        self._q.put(text or self.message)
        logger.debug("Announcing: %s", text or self.message)

    def trigger(self) -> None:
        self.speak()

    def close(self) -> None:
        self._stop.set()
        self._t.join(timeout=1.0)
