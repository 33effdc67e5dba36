"""
Haptic pulse using evdev force feedback.

Plays a short rumble on the first input device that supports FF_RUMBLE
(gamepads, some laptops and tablets).
"""
from typing import Optional
import logging

try:
    import evdev
    from evdev import ecodes, ff, InputDevice
    EVDEV_AVAILABLE = True
except ImportError:
    EVDEV_AVAILABLE = False
    evdev = None
    ecodes = None
    ff = None

from .errors import ActuatorError

logger = logging.getLogger(__name__)


def find_rumble_device() -> Optional[str]:
    """
    Auto-detect the first device with rumble support.

    Returns the device path (e.g., '/dev/input/event5') or None.
    """
    if not EVDEV_AVAILABLE:
        return None

    for path in evdev.list_devices():
        try:
            device = InputDevice(path)
        except (PermissionError, OSError):
            continue
        try:
            caps = device.capabilities()
            if ecodes.FF_RUMBLE in caps.get(ecodes.EV_FF, []):
                logger.debug("Found rumble device: %s at %s", device.name, path)
                return path
        finally:
            device.close()

    return None


class Rumble:
    """
    Fire-and-forget vibration.

    Usage:
        rumble = Rumble(duration_ms=200)
        rumble.pulse()
        ...
        rumble.close()
    """

    name = "vibration"

    def __init__(self, duration_ms: int = 200, strength: int = 0xC000,
                 device_path: Optional[str] = None):
        """
        Args:
            duration_ms: Pulse length
            strength: Strong motor magnitude (0 - 0xFFFF)
            device_path: Specific device path, or None to auto-detect
        """
        self._duration_ms = duration_ms
        self._strength = strength
        self._device_path = device_path
        self._device: Optional["InputDevice"] = None
        self._effect_id: Optional[int] = None

    @property
    def connected(self) -> bool:
        return self._device is not None

    def connect(self) -> None:
        """
        Open the rumble device and upload the effect.

        Raises:
            ActuatorError: if evdev is missing or no usable device exists
        """
        if not EVDEV_AVAILABLE:
            raise ActuatorError("python-evdev not installed")

        path = self._device_path or find_rumble_device()
        if not path:
            raise ActuatorError("No rumble device found")

        try:
            self._device = InputDevice(path)
            rumble = ff.Rumble(strong_magnitude=self._strength, weak_magnitude=0)
            effect = ff.Effect(
                ecodes.FF_RUMBLE, -1, 0,
                ff.Trigger(0, 0),
                ff.Replay(self._duration_ms, 0),
                ff.EffectType(ff_rumble_effect=rumble),
            )
            self._effect_id = self._device.upload_effect(effect)
            self._device_path = path
        except (PermissionError, OSError) as e:
            self.close()
            raise ActuatorError(f"Cannot open rumble device {path}: {e}") from e

    def pulse(self) -> None:
        """Play one pulse. Connects lazily."""
        if self._device is None:
            self.connect()
        try:
            self._device.write(ecodes.EV_FF, self._effect_id, 1)
        except OSError as e:
            raise ActuatorError(f"Rumble failed: {e}") from e

    def trigger(self) -> None:
        self.pulse()

    def close(self) -> None:
        if self._device is None:
            return
        try:
            if self._effect_id is not None:
                self._device.erase_effect(self._effect_id)
            self._device.close()
        except OSError as e:
            logger.warning("Error releasing rumble device: %s", e)
        self._device = None
        self._effect_id = None
