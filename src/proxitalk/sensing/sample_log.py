"""
Bounded, time-windowed store of recent sensor readings.
Feeds the real-time graph and diagnostics.
"""
from collections import deque
from typing import Callable, Deque, List, Optional
import threading

from .reading import Reading, monotonic_ms


class SampleLog:
    """
    Append-only buffer of the most recent readings.

    Two bounds hold after every append: at most ``max_points`` entries, and
    no entry older than ``max_age_ms`` relative to the newest reading. The
    oldest entries are evicted first. Eviction only happens inside
    ``append``; an idle log keeps its contents until the next reading.

    Reads return copies and may be called from another thread while the
    sensor thread appends.
    """

    def __init__(
        self,
        max_points: int = 300,
        max_age_ms: float = 30000,
        clock: Callable[[], float] = monotonic_ms,
    ):
        """
        Args:
            max_points: Maximum number of retained readings
            max_age_ms: Maximum age of a retained reading
            clock: Millisecond clock used by ``recent``
        """
        self._max_points = max_points
        self._max_age_ms = max_age_ms
        self._clock = clock
        self._readings: Deque[Reading] = deque()
        self._lock = threading.Lock()

    @property
    def max_points(self) -> int:
        return self._max_points

    @property
    def max_age_ms(self) -> float:
        return self._max_age_ms

    def append(self, reading: Reading) -> None:
        """Add a reading, then trim by age and by count."""
        with self._lock:
            self._readings.append(reading)

            cutoff = reading.timestamp - self._max_age_ms
            while self._readings and self._readings[0].timestamp < cutoff:
                self._readings.popleft()

            while len(self._readings) > self._max_points:
                self._readings.popleft()

    def all(self) -> List[Reading]:
        """Snapshot of every retained reading, oldest first."""
        with self._lock:
            return list(self._readings)

    def recent(self, seconds: float) -> List[Reading]:
        """Readings from the last ``seconds`` seconds of the clock."""
        cutoff = self._clock() - seconds * 1000.0
        with self._lock:
            return [r for r in self._readings if r.timestamp >= cutoff]

    def last(self) -> Optional[Reading]:
        with self._lock:
            return self._readings[-1] if self._readings else None

    def count(self) -> int:
        with self._lock:
            return len(self._readings)

    def clear(self) -> None:
        with self._lock:
            self._readings.clear()

    def __len__(self) -> int:
        return self.count()
