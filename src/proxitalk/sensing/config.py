"""
Config loader for ProxiTalk.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class SensorConfig:
    backend: str = "auto"          # "auto", "iio", "evdev" or "simulated"
    poll_hz: int = 50
    iio_root: str = "/sys/bus/iio/devices"

    # Near/far thresholds in each modality's native unit
    proximity_threshold: float = 3.0   # cm, near below
    proximity_max_range: float = 5.0   # used when the device reports none
    light_threshold: float = 10.0      # lux, near (covered) below
    light_max_range: float = 5.0
    motion_threshold: float = 10.0     # m/s^2, shake above
    motion_max_range: float = 10.0

    # Two-level distance proxy for light and motion
    near_proxy: float = 1.0
    far_proxy: float = 5.0


@dataclass
class GestureConfig:
    window_ms: int = 2000
    required_events: int = 3
    cooldown_ms: int = 2000

    # Minimum delta counted as a change, per modality
    significance_proximity: float = 0.2
    significance_light: float = 5.0
    significance_motion: float = 5.0


@dataclass
class LogConfig:
    max_points: int = 300
    max_age_ms: int = 30000


@dataclass
class FeedbackConfig:
    vibrate: bool = True
    vibration_ms: int = 200
    speak: bool = True
    message: str = "Simulated notification: you have new messages."
    speech_rate: int = 175
    speech_volume: float = 1.0


@dataclass
class UIConfig:
    refresh_ms: int = 100
    graph_points: int = 100


@dataclass
class Config:
    sensor: SensorConfig = field(default_factory=SensorConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    log: LogConfig = field(default_factory=LogConfig)
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        sensor=_dict_to_dataclass(SensorConfig, data.get('sensor')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        log=_dict_to_dataclass(LogConfig, data.get('log')),
        feedback=_dict_to_dataclass(FeedbackConfig, data.get('feedback')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
