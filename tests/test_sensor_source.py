import math
import pytest
from src.proxitalk.sensing.backends import SimulatedBackend, SimulatedDevice
from src.proxitalk.sensing.config import SensorConfig
from src.proxitalk.sensing.modality import Modality, NoSensorAvailable
from src.proxitalk.sensing.sensor_source import SensorSourceSelector


def device(modality, samples=(), **kwargs):
    return SimulatedDevice(modality, list(samples), name=f"sim {modality.name.lower()}", **kwargs)


def selector_for(*devices):
    return SensorSourceSelector(SimulatedBackend(devices), SensorConfig())


def test_proximity_has_priority():
    selector = selector_for(device(Modality.MOTION), device(Modality.LIGHT), device(Modality.PROXIMITY))
    assert selector.select_and_start() == Modality.PROXIMITY
    assert selector.modality == Modality.PROXIMITY


def test_light_before_motion():
    selector = selector_for(device(Modality.MOTION), device(Modality.LIGHT))
    assert selector.select_and_start() == Modality.LIGHT


def test_motion_as_last_resort():
    selector = selector_for(device(Modality.MOTION))
    assert selector.select_and_start() == Modality.MOTION


def test_no_sensor_available():
    selector = selector_for()
    with pytest.raises(NoSensorAvailable):
        selector.select_and_start()
    assert selector.modality == Modality.NONE
    assert selector.read() is None
    assert selector.max_range() == 0.0


def test_unopenable_device_falls_back():
    class BrokenDevice(SimulatedDevice):
        def open(self):
            raise PermissionError("denied")

    selector = selector_for(BrokenDevice(Modality.PROXIMITY, []), device(Modality.LIGHT))
    assert selector.select_and_start() == Modality.LIGHT


def test_start_and_stop_manage_the_device():
    light = device(Modality.LIGHT)
    selector = selector_for(light)

    selector.select_and_start()
    assert light.opened

    selector.stop()
    assert not light.opened
    assert selector.modality == Modality.NONE


def test_restart_reselects():
    selector = selector_for(device(Modality.PROXIMITY))
    selector.select_and_start()
    assert selector.select_and_start() == Modality.PROXIMITY


def test_proximity_normalization():
    selector = selector_for(device(Modality.PROXIMITY))
    selector.select_and_start()

    near = selector.normalize([2.9])
    far = selector.normalize([3.0])

    assert near.is_near and near.distance == 2.9 and near.raw_value == 2.9
    assert not far.is_near and far.distance == 3.0


def test_light_normalization_uses_distance_proxy():
    selector = selector_for(device(Modality.LIGHT))
    selector.select_and_start()

    covered = selector.normalize([4.0])
    bright = selector.normalize([250.0])

    assert covered.is_near and covered.distance == 1.0 and covered.raw_value == 4.0
    assert not bright.is_near and bright.distance == 5.0


def test_motion_normalization_uses_magnitude():
    selector = selector_for(device(Modality.MOTION))
    selector.select_and_start()

    resting = selector.normalize([0.0, 0.0, 9.81])
    shaken = selector.normalize([6.0, 6.0, 6.0])

    assert not resting.is_near
    assert resting.raw_value == pytest.approx(9.81)
    assert shaken.is_near
    assert shaken.raw_value == pytest.approx(math.sqrt(108))
    assert shaken.distance == 1.0


@pytest.mark.parametrize("modality, values", [
    (Modality.PROXIMITY, [math.nan]),
    (Modality.PROXIMITY, [-1.0]),
    (Modality.PROXIMITY, []),
    (Modality.LIGHT, [math.inf]),
    (Modality.LIGHT, [-5.0]),
    (Modality.MOTION, [1.0, 2.0]),
    (Modality.MOTION, [1.0, math.nan, 2.0]),
    (Modality.MOTION, ["x", 0.0, 0.0]),
])
def test_malformed_samples(modality, values):
    selector = selector_for(device(modality))
    selector.select_and_start()
    assert selector.normalize(values) is None


def test_read_normalizes_device_samples():
    selector = selector_for(device(Modality.PROXIMITY, [(5.0,), (1.0,)]))
    selector.select_and_start()

    assert selector.read().is_near is False
    assert selector.read().is_near is True


def test_max_range_per_modality():
    selector = selector_for(device(Modality.PROXIMITY, max_range=8.0))
    selector.select_and_start()
    assert selector.max_range() == 8.0

    selector = selector_for(device(Modality.PROXIMITY))
    selector.select_and_start()
    assert selector.max_range() == 5.0

    selector = selector_for(device(Modality.LIGHT))
    selector.select_and_start()
    assert selector.max_range() == 5.0

    selector = selector_for(device(Modality.MOTION))
    selector.select_and_start()
    assert selector.max_range() == 10.0


def test_describe_and_availability(caplog):
    selector = selector_for(device(Modality.LIGHT), device(Modality.MOTION))
    assert selector.describe() == "No sensor"
    assert selector.available_modalities() == [Modality.LIGHT, Modality.MOTION]

    with caplog.at_level("INFO"):
        selector.log_availability()
    assert "PROXIMITY sensor: not available" in caplog.text

    selector.select_and_start()
    assert selector.describe() == "LIGHT (sim light)"
