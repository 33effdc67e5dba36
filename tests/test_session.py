import pytest
from src.proxitalk.sensing.backends import SimulatedBackend, SimulatedDevice
from src.proxitalk.sensing.config import Config
from src.proxitalk.sensing.modality import Modality, NoSensorAvailable
from src.proxitalk.sensing.reading import Observation
from src.proxitalk.sensing.session import MonitoringSession


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


NEAR = Observation(raw_value=0.0, distance=0.0, is_near=True)
FAR = Observation(raw_value=5.0, distance=5.0, is_near=False)


@pytest.fixture
def clock():
    return FakeClock()


def proximity_session(clock, samples=()):
    device = SimulatedDevice(Modality.PROXIMITY, list(samples), max_range=5.0)
    return MonitoringSession(SimulatedBackend([device]), Config(), clock=clock), device


def test_start_builds_detector_for_modality(clock):
    session, _ = proximity_session(clock)
    assert session.start() == Modality.PROXIMITY
    assert session.is_running
    assert session.detector.significance_threshold == 0.2
    assert session.detector.required_events == 3

    light = SimulatedDevice(Modality.LIGHT, [])
    session = MonitoringSession(SimulatedBackend([light]), Config(), clock=clock)
    session.start()
    assert session.detector.significance_threshold == 5.0


def test_start_without_sensor(clock):
    session = MonitoringSession(SimulatedBackend(), Config(), clock=clock)
    with pytest.raises(NoSensorAvailable):
        session.start()
    assert not session.is_running
    assert session.poll() is None


def test_handle_logs_every_observation(clock):
    session, _ = proximity_session(clock)
    session.start()

    session.handle(0, FAR)
    session.handle(100, NEAR)

    readings = session.log.all()
    assert [(r.timestamp, r.distance, r.is_near) for r in readings] == [
        (0, 5.0, False),
        (100, 0.0, True),
    ]


def test_malformed_observation_is_skipped(clock):
    session, _ = proximity_session(clock)
    session.start()

    assert session.handle(0, None) is None
    assert session.log.count() == 0


def test_gesture_reaches_listeners(clock):
    session, _ = proximity_session(clock)
    received = []
    session.add_gesture_listener(received.append)
    session.start()

    event = None
    for t in (0, 500, 1000):
        session.handle(t, FAR)
        event = session.handle(t + 100, NEAR)

    assert event is not None
    assert received == [event]
    assert session.last_gesture is event


def test_failing_listener_does_not_break_session(clock):
    session, _ = proximity_session(clock)
    received = []

    def broken(event):
        raise RuntimeError("boom")

    session.add_gesture_listener(broken)
    session.add_gesture_listener(received.append)
    session.start()

    for t in (0, 500, 1000):
        session.handle(t, FAR)
        session.handle(t + 100, NEAR)

    assert len(received) == 1
    assert session.log.count() == 6


def test_poll_reads_sensor_at_clock_time(clock):
    samples = [(5.0,), (0.5,)] * 3
    session, _ = proximity_session(clock, samples)
    session.start()

    events = []
    for step in range(len(samples)):
        clock.now = step * 100
        events.append(session.poll())

    assert [r.timestamp for r in session.log.all()] == [0, 100, 200, 300, 400, 500]
    assert events[:-1] == [None] * 5
    assert events[-1] is not None
    assert events[-1].timestamp == 500


def test_stop_releases_sensor(clock):
    session, device = proximity_session(clock, [(1.0,)])
    session.start()
    assert device.opened

    session.stop()
    assert not device.opened
    assert not session.is_running
    assert session.poll() is None


def test_restart_resets_detector_but_keeps_log(clock):
    session, _ = proximity_session(clock)
    session.start()
    session.handle(0, NEAR)
    assert session.detector.pending_events == [0]

    session.stop()
    session.start()

    assert session.detector.pending_events == []
    assert session.log.count() == 1
