"""
Monitor window - status, sensor info, live graph and start/stop controls.
"""
from PyQt5.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton
from PyQt5.QtCore import QTimer, pyqtSignal

from .graph_widget import ProximityGraph


class MonitorWindow(QMainWindow):
    """
    Main window. Pulls snapshots from the sample log on a fixed cadence;
    never writes to it.
    """
    start_requested = pyqtSignal()
    stop_requested = pyqtSignal()

    GESTURE_FLASH_MS = 2000

    def __init__(self, log, refresh_ms: int = 100, graph_points: int = 100, parent=None):
        super().__init__(parent)
        self._log = log
        self._monitoring = False
        self._start_pending = False
        self._modality = None
        self._max_range = 0.0

        self.setWindowTitle("ProxiTalk")
        self._setup_ui(graph_points)

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setInterval(refresh_ms)
        self._refresh_timer.timeout.connect(self.refresh)

        self._flash_timer = QTimer(self)
        self._flash_timer.setSingleShot(True)
        self._flash_timer.timeout.connect(self._clear_flash)

        self.refresh()

    def _setup_ui(self, graph_points: int):
        central = QWidget()
        layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        self.status_label = QLabel("Press Start to monitor")
        self.sensor_label = QLabel("Sensor: not started")
        self.count_label = QLabel("Readings: 0")
        for label in (self.status_label, self.sensor_label, self.count_label):
            layout.addWidget(label)

        self.graph = ProximityGraph(max_points=graph_points)
        layout.addWidget(self.graph, 1)

        buttons = QHBoxLayout()
        self.start_button = QPushButton("Start")
        self.stop_button = QPushButton("Stop")
        self.start_button.clicked.connect(lambda: self._request_start())
        self.stop_button.clicked.connect(lambda: self.stop_requested.emit())
        buttons.addWidget(self.start_button)
        buttons.addWidget(self.stop_button)
        layout.addLayout(buttons)

    def _request_start(self):
        """Queue one start request; Start stays disabled until the worker answers."""
        if self._monitoring or self._start_pending:
            return
        self._start_pending = True
        self.start_button.setEnabled(False)
        self.start_requested.emit()

    def on_started(self, modality, description: str, max_range: float):
        """Monitoring is live on ``modality``."""
        self._monitoring = True
        self._start_pending = False
        self._modality = modality
        self._max_range = max_range
        self.graph.set_modality(modality)
        self.graph.set_max_range(max_range)
        self.set_status(f"Monitoring sensor: {description}")
        self._refresh_timer.start()
        self.refresh()

    def on_stopped(self):
        self._monitoring = False
        self._start_pending = False
        self._refresh_timer.stop()
        self.set_status("Monitoring stopped")
        self.refresh()

    def on_error(self, message: str):
        self._start_pending = False
        self.set_status(message)
        self.refresh()

    def show_gesture(self, event=None):
        name = self._modality.name if self._modality is not None else "sensor"
        self.set_status(f"Gesture detected! ({name}) Reading notifications...")
        self.status_label.setStyleSheet("background-color: green; color: white;")
        self._flash_timer.start(self.GESTURE_FLASH_MS)

    def _clear_flash(self):
        self.status_label.setStyleSheet("")

    def set_status(self, message: str):
        self.status_label.setText(message)

    def refresh(self):
        """Redraw from a fresh log snapshot."""
        if self._modality is not None:
            self.sensor_label.setText(
                f"Sensor: {self._modality.name} (max {self._max_range:.1f})"
            )

        readings = self._log.all()
        self.count_label.setText(f"Readings: {len(readings)}")
        self.graph.update_data(readings)

        last = readings[-1] if readings else None
        if last is not None and last.is_near:
            self.count_label.setStyleSheet("background-color: red; color: white;")
        else:
            self.count_label.setStyleSheet("")

        self.start_button.setEnabled(not (self._monitoring or self._start_pending))
        self.stop_button.setEnabled(self._monitoring)
