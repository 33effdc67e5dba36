"""
Sensor source selection and per-modality normalization.

Picks one sensor by fixed priority when monitoring starts and maps its raw
values into the shared near/far observation model, so nothing downstream
needs to know which physical sensor is live.
"""
from typing import Callable, Dict, List, Optional, Sequence
import logging
import math

from .backends import SensorBackend, SensorDevice
from .config import SensorConfig
from .modality import Modality, NoSensorAvailable, PRIORITY
from .reading import Observation

logger = logging.getLogger(__name__)


class SensorSourceSelector:
    """
    Owns the single active sensor of a monitoring session.

    Usage:
        selector = SensorSourceSelector(backend, config.sensor)
        modality = selector.select_and_start()   # may raise NoSensorAvailable
        observation = selector.read()
        ...
        selector.stop()
    """

    def __init__(self, backend: SensorBackend, config: SensorConfig):
        self._backend = backend
        self._config = config
        self._device: Optional[SensorDevice] = None
        self._modality = Modality.NONE

        self._normalizers: Dict[Modality, Callable[[Sequence[float]], Optional[Observation]]] = {
            Modality.PROXIMITY: self._normalize_proximity,
            Modality.LIGHT: self._normalize_light,
            Modality.MOTION: self._normalize_motion,
        }

    @property
    def modality(self) -> Modality:
        return self._modality

    @property
    def device(self) -> Optional[SensorDevice]:
        return self._device

    def select_and_start(self) -> Modality:
        """
        Activate the first available sensor in priority order.

        Raises:
            NoSensorAvailable: if no modality has a device
        """
        self.stop()

        for modality in PRIORITY:
            device = self._backend.find(modality)
            if device is None:
                continue
            try:
                device.open()
            except OSError as e:
                logger.warning("Could not open %s sensor %s: %s", modality.name, device.name, e)
                continue
            self._device = device
            self._modality = modality
            logger.info("Using %s sensor: %s", modality.name, device.name)
            return modality

        raise NoSensorAvailable()

    def stop(self) -> None:
        if self._device is not None:
            self._device.close()
            logger.debug("Closed %s sensor %s", self._modality.name, self._device.name)
        self._device = None
        self._modality = Modality.NONE

    def read(self) -> Optional[Observation]:
        """Read and normalize one sample from the active sensor."""
        if self._device is None:
            return None
        values = self._device.read()
        if values is None:
            return None
        return self.normalize(values)

    def normalize(self, values: Sequence[float]) -> Optional[Observation]:
        """
        Map raw values of the active modality to an observation.

        Returns None for malformed samples (wrong arity, non-finite, negative
        distance or lux) and when no sensor is active.
        """
        normalizer = self._normalizers.get(self._modality)
        if normalizer is None:
            return None
        try:
            values = [float(v) for v in values]
        except (TypeError, ValueError):
            return None
        if not all(math.isfinite(v) for v in values):
            return None
        return normalizer(values)

    def max_range(self) -> float:
        """Nominal display scale of the active modality."""
        if self._modality == Modality.PROXIMITY:
            if self._device is not None and self._device.max_range:
                return self._device.max_range
            return self._config.proximity_max_range
        if self._modality == Modality.LIGHT:
            return self._config.light_max_range
        if self._modality == Modality.MOTION:
            return self._config.motion_max_range
        return 0.0

    def describe(self) -> str:
        if self._device is None:
            return "No sensor"
        return f"{self._modality.name} ({self._device.name})"

    def available_modalities(self) -> List[Modality]:
        return [m for m in PRIORITY if self._backend.find(m) is not None]

    def log_availability(self) -> None:
        available = self.available_modalities()
        for modality in PRIORITY:
            state = "available" if modality in available else "not available"
            logger.info("%s sensor: %s", modality.name, state)

    def _proxy(self, is_near: bool) -> float:
        return self._config.near_proxy if is_near else self._config.far_proxy

    def _normalize_proximity(self, values: List[float]) -> Optional[Observation]:
        if len(values) < 1 or values[0] < 0:
            return None
        distance = values[0]
        return Observation(
            raw_value=distance,
            distance=distance,
            is_near=distance < self._config.proximity_threshold,
        )

    def _normalize_light(self, values: List[float]) -> Optional[Observation]:
        if len(values) < 1 or values[0] < 0:
            return None
        lux = values[0]
        is_near = lux < self._config.light_threshold
        return Observation(raw_value=lux, distance=self._proxy(is_near), is_near=is_near)

    def _normalize_motion(self, values: List[float]) -> Optional[Observation]:
        if len(values) < 3:
            return None
        x, y, z = values[:3]
        magnitude = math.sqrt(x*x + y*y + z*z)
        is_near = magnitude > self._config.motion_threshold
        return Observation(raw_value=magnitude, distance=self._proxy(is_near), is_near=is_near)
