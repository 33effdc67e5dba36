import os
import time
import pytest

pytest.importorskip("PyQt5.QtWidgets")
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtCore import QThread, Qt
from PyQt5.QtWidgets import QApplication

from src.proxitalk.sensing.backends import SimulatedBackend, SimulatedDevice
from src.proxitalk.sensing.config import Config
from src.proxitalk.sensing.modality import Modality
from src.proxitalk.sensing.sample_log import SampleLog
from src.proxitalk.sensing.session import MonitoringSession
from src.proxitalk.sensing.worker import MonitorWorker
from src.proxitalk.ui import MonitorWindow


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


def pump(app, seconds):
    deadline = time.time() + seconds
    while time.time() < deadline:
        app.processEvents()
        time.sleep(0.01)


def test_start_is_disabled_until_worker_answers(qapp):
    window = MonitorWindow(SampleLog())
    requests = []
    window.start_requested.connect(lambda: requests.append(True))

    window.start_button.click()
    window.start_button.click()

    assert requests == [True]
    assert not window.start_button.isEnabled()
    assert not window.stop_button.isEnabled()

    window.on_started(Modality.PROXIMITY, "PROXIMITY (sim)", 5.0)
    assert not window.start_button.isEnabled()
    assert window.stop_button.isEnabled()

    window.on_stopped()
    assert window.start_button.isEnabled()
    assert not window.stop_button.isEnabled()


def test_failed_start_enables_start_again(qapp):
    window = MonitorWindow(SampleLog())
    window.start_button.click()
    assert not window.start_button.isEnabled()

    window.on_error("No sensor available")

    assert window.start_button.isEnabled()
    assert window.status_label.text() == "No sensor available"


def test_double_start_then_stop_leaves_session_stopped(qapp):
    device = SimulatedDevice(Modality.PROXIMITY, [(5.0,), (0.5,)])
    session = MonitoringSession(SimulatedBackend([device]), Config())
    window = MonitorWindow(session.log)

    thread = QThread()
    worker = MonitorWorker(session, poll_hz=200)
    worker.moveToThread(thread)

    def handle_started(modality):
        window.on_started(modality, session.selector.describe(), session.selector.max_range())

    window.start_requested.connect(worker.start_process)
    window.stop_requested.connect(worker.stop_process, Qt.DirectConnection)
    worker.started.connect(handle_started, Qt.QueuedConnection)
    worker.stopped.connect(window.on_stopped, Qt.QueuedConnection)
    thread.start()

    try:
        window.start_button.click()
        window.start_button.click()
        pump(qapp, 0.3)
        assert session.is_running

        window.stop_button.click()
        pump(qapp, 0.5)

        assert not session.is_running
        assert not device.opened
        assert window.start_button.isEnabled()
    finally:
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
