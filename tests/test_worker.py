import pytest

pytest.importorskip("PyQt5.QtCore")

from src.proxitalk.sensing.backends import SimulatedBackend, SimulatedDevice
from src.proxitalk.sensing.config import Config
from src.proxitalk.sensing.modality import Modality
from src.proxitalk.sensing.session import MonitoringSession
from src.proxitalk.sensing.worker import MonitorWorker


def test_worker_reports_missing_sensor():
    session = MonitoringSession(SimulatedBackend(), Config())
    worker = MonitorWorker(session, poll_hz=1000)
    errors = []
    worker.error.connect(errors.append)

    worker.start_process()

    assert len(errors) == 1
    assert "No sensor available" in errors[0]
    assert not worker.is_running


def test_worker_runs_until_stopped():
    samples = [(5.0,), (0.5,)] * 3
    device = SimulatedDevice(Modality.PROXIMITY, samples + [(5.0,)] * 100)
    session = MonitoringSession(SimulatedBackend([device]), Config())
    worker = MonitorWorker(session, poll_hz=1000)

    started, gestures, stopped = [], [], []
    worker.started.connect(started.append)
    worker.stopped.connect(lambda: stopped.append(True))

    def on_gesture(event):
        gestures.append(event)
        worker.stop_process()

    worker.gesture_detected.connect(on_gesture)

    worker.start_process()

    assert started == [Modality.PROXIMITY]
    assert session.log.count() == 6
    assert len(gestures) == 1
    assert stopped == [True]
    assert not device.opened
    assert not session.is_running
