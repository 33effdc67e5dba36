"""
Sensor backends: hardware discovery and raw sample reads.

Backends only find devices and read raw values. Interpreting the values
(near/far, distance proxy) is the sensor source selector's job.
"""
from itertools import cycle
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple
import logging

try:
    import evdev
    from evdev import ecodes, InputDevice
    EVDEV_AVAILABLE = True
except ImportError:
    EVDEV_AVAILABLE = False
    evdev = None
    ecodes = None

from .config import SensorConfig
from .modality import Modality

logger = logging.getLogger(__name__)

STANDARD_GRAVITY = 9.80665

Sample = Tuple[float, ...]


class SensorDevice:
    """
    One physical (or simulated) sensor.

    Subclasses implement ``read`` and may override ``open``/``close``.
    """

    def __init__(self, modality: Modality, name: str, max_range: Optional[float] = None):
        self.modality = modality
        self.name = name
        self.max_range = max_range

    def open(self) -> None:
        pass

    def read(self) -> Optional[Sample]:
        """Return the current raw sample, or None if nothing is available."""
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __repr__(self):
        return f"{type(self).__name__}({self.modality.name}, {self.name!r})"


class SensorBackend:
    """Finds a device for a modality."""

    def find(self, modality: Modality) -> Optional[SensorDevice]:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Linux Industrial I/O (sysfs)
# ---------------------------------------------------------------------------

class IioChannel:
    """A single sysfs value file with optional offset and scale files."""

    def __init__(self, value_path: Path, scale_path: Optional[Path] = None,
                 offset_path: Optional[Path] = None, factor: float = 1.0):
        self.value_path = value_path
        self.scale_path = scale_path
        self.offset_path = offset_path
        self.factor = factor

    def read(self) -> float:
        value = _read_float(self.value_path)
        offset = _read_float(self.offset_path) if self.offset_path else 0.0
        scale = _read_float(self.scale_path) if self.scale_path else 1.0
        return (value + offset) * scale * self.factor


class IioDevice(SensorDevice):
    """IIO device read through sysfs, one channel per sample component."""

    def __init__(self, modality: Modality, name: str, channels: List[IioChannel],
                 max_range: Optional[float] = None):
        super().__init__(modality, name, max_range)
        self._channels = channels

    def read(self) -> Optional[Sample]:
        try:
            return tuple(ch.read() for ch in self._channels)
        except (OSError, ValueError) as e:
            logger.debug("IIO read failed on %s: %s", self.name, e)
            return None


class IioBackend(SensorBackend):
    """
    Discovers sensors under /sys/bus/iio/devices.

    - PROXIMITY: distance channel (time-of-flight sensors), reported in cm
    - LIGHT: illuminance channel, lux
    - MOTION: accelerometer x/y/z, m/s^2
    """

    # IIO distance is in metres after scaling
    _METRES_TO_CM = 100.0

    def __init__(self, root: str = "/sys/bus/iio/devices"):
        self._root = Path(root)

    def find(self, modality: Modality) -> Optional[SensorDevice]:
        if not self._root.is_dir():
            return None

        for device_dir in sorted(self._root.glob("iio:device*")):
            name = _read_text(device_dir / "name") or device_dir.name
            channels = self._channels_for(device_dir, modality)
            if channels:
                logger.debug("IIO %s sensor: %s at %s", modality.name, name, device_dir)
                return IioDevice(modality, name, channels)
        return None

    def _channels_for(self, device_dir: Path, modality: Modality) -> Optional[List[IioChannel]]:
        if modality == Modality.PROXIMITY:
            ch = _find_channel(device_dir, ["in_distance", "in_distance0"], self._METRES_TO_CM)
            return [ch] if ch else None
        if modality == Modality.LIGHT:
            ch = _find_channel(device_dir, ["in_illuminance", "in_illuminance0"])
            return [ch] if ch else None
        if modality == Modality.MOTION:
            axes = [_find_channel(device_dir, [f"in_accel_{axis}"], shared_prefix="in_accel")
                    for axis in "xyz"]
            if all(axes):
                return axes
        return None


def _find_channel(device_dir: Path, prefixes: Sequence[str], factor: float = 1.0,
                  shared_prefix: Optional[str] = None) -> Optional[IioChannel]:
    """
    Locate a channel by prefix.

    Prefers the processed ``_input`` file, falls back to ``_raw`` with the
    channel's (or the shared) ``_scale`` and ``_offset``.
    """
    for prefix in prefixes:
        processed = device_dir / f"{prefix}_input"
        if processed.exists():
            return IioChannel(processed, factor=factor)

        raw = device_dir / f"{prefix}_raw"
        if raw.exists():
            scale = _first_existing(device_dir, prefix, shared_prefix, "scale")
            offset = _first_existing(device_dir, prefix, shared_prefix, "offset")
            return IioChannel(raw, scale, offset, factor)
    return None


def _first_existing(device_dir: Path, prefix: str, shared_prefix: Optional[str],
                    suffix: str) -> Optional[Path]:
    for p in (prefix, shared_prefix):
        if p:
            path = device_dir / f"{p}_{suffix}"
            if path.exists():
                return path
    return None


def _read_float(path: Path) -> float:
    return float(path.read_text().strip())


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text().strip()
    except OSError:
        return None


# ---------------------------------------------------------------------------
# evdev accelerometers
# ---------------------------------------------------------------------------

class EvdevAccelerometer(SensorDevice):
    """Accelerometer exposed as an evdev input device (ABS_X/Y/Z)."""

    def __init__(self, path: str, name: str):
        super().__init__(Modality.MOTION, name)
        self._path = path
        self._device: Optional["InputDevice"] = None

    def open(self) -> None:
        self._device = InputDevice(self._path)

    def read(self) -> Optional[Sample]:
        if self._device is None:
            return None
        try:
            return tuple(self._axis(code) for code in (ecodes.ABS_X, ecodes.ABS_Y, ecodes.ABS_Z))
        except OSError as e:
            logger.debug("evdev read failed on %s: %s", self.name, e)
            return None

    def _axis(self, code: int) -> float:
        info = self._device.absinfo(code)
        # Resolution is units per g for accelerometers
        if info.resolution:
            return info.value / info.resolution * STANDARD_GRAVITY
        return float(info.value)

    def close(self) -> None:
        if self._device:
            try:
                self._device.close()
            except OSError:
                pass
            self._device = None


class EvdevBackend(SensorBackend):
    """Finds accelerometers among evdev input devices. MOTION only."""

    def find(self, modality: Modality) -> Optional[SensorDevice]:
        if modality != Modality.MOTION or not EVDEV_AVAILABLE:
            return None

        for path in evdev.list_devices():
            try:
                device = InputDevice(path)
            except (PermissionError, OSError):
                continue
            try:
                if ecodes.INPUT_PROP_ACCELEROMETER in device.input_props():
                    logger.debug("evdev accelerometer: %s at %s", device.name, path)
                    return EvdevAccelerometer(path, device.name)
            finally:
                device.close()
        return None


# ---------------------------------------------------------------------------
# Simulated and combined backends
# ---------------------------------------------------------------------------

class SimulatedDevice(SensorDevice):
    """
    Plays back a scripted sample sequence, one sample per read.

    Once the script runs out the last sample repeats.
    """

    def __init__(self, modality: Modality, samples: Iterable[Sample],
                 name: str = "simulated", max_range: Optional[float] = None):
        super().__init__(modality, name, max_range)
        self._samples: Iterator[Sample] = iter(samples)
        self._last: Optional[Sample] = None
        self.opened = False

    def open(self) -> None:
        self.opened = True

    def read(self) -> Optional[Sample]:
        self._last = next(self._samples, self._last)
        return self._last

    def close(self) -> None:
        self.opened = False


class SimulatedBackend(SensorBackend):
    def __init__(self, devices: Iterable[SensorDevice] = ()):
        self._devices: Dict[Modality, SensorDevice] = {d.modality: d for d in devices}

    def find(self, modality: Modality) -> Optional[SensorDevice]:
        return self._devices.get(modality)


class ChainedBackend(SensorBackend):
    """Asks each backend in turn; the first device found wins."""

    def __init__(self, backends: Iterable[SensorBackend]):
        self._backends = list(backends)

    def find(self, modality: Modality) -> Optional[SensorDevice]:
        for backend in self._backends:
            device = backend.find(modality)
            if device is not None:
                return device
        return None


def simulated_passes(
    poll_hz: int = 50,
    far: float = 5.0,
    near: float = 0.0,
    passes: int = 3,
    pass_ms: int = 200,
    gap_ms: int = 300,
    pause_ms: int = 5000,
) -> Iterator[Sample]:
    """
    Endless proximity signal: bursts of quick hand passes, then a pause.
    """
    def samples(ms: int) -> int:
        return max(1, int(ms * poll_hz / 1000))

    pattern: List[Sample] = []
    for _ in range(passes):
        pattern += [(near,)] * samples(pass_ms)
        pattern += [(far,)] * samples(gap_ms)
    pattern += [(far,)] * samples(pause_ms)
    return cycle(pattern)


def create_backend(config: SensorConfig) -> SensorBackend:
    """Build the backend named in the sensor config."""
    kind = config.backend
    if kind == "iio":
        return IioBackend(config.iio_root)
    if kind == "evdev":
        return EvdevBackend()
    if kind == "simulated":
        return SimulatedBackend([
            SimulatedDevice(
                Modality.PROXIMITY,
                simulated_passes(config.poll_hz, far=config.proximity_max_range),
                name="simulated proximity",
                max_range=config.proximity_max_range,
            )
        ])
    if kind == "auto":
        return ChainedBackend([IioBackend(config.iio_root), EvdevBackend()])
    raise ValueError(f"Unknown sensor backend: {kind}")
