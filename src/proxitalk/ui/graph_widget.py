"""
Real-time graph of recent sensor readings.
"""
from typing import List, Optional, Sequence
from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QPointF, QSize
from PyQt5.QtGui import QPainter, QPen, QColor, QFont, QPainterPath


class ProximityGraph(QWidget):
    """Line graph of distance estimates; near readings are drawn red."""

    GRID_SPACING = 50
    MARGIN = 50

    BACKGROUND = QColor(0, 0, 0)
    GRID = QColor(128, 128, 128)
    LINE = QColor(0, 255, 0)
    NEAR = QColor(255, 0, 0)
    TEXT = QColor(255, 255, 255)

    def __init__(self, max_points: int = 100, parent=None):
        super().__init__(parent)
        self._max_points = max(2, max_points)
        self._readings: List = []
        self._max_range = 5.0
        self._modality_name = ""

    def update_data(self, readings: Sequence) -> None:
        """Replace the plotted data with the tail of ``readings``."""
        self._readings = list(readings)[-self._max_points:]
        self.update()

    def set_max_range(self, value: float) -> None:
        self._max_range = value if value > 0 else 5.0
        self.update()

    def set_modality(self, modality) -> None:
        self._modality_name = getattr(modality, "name", str(modality or ""))
        self.update()

    def sizeHint(self) -> QSize:
        return QSize(800, 400)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        w, h = self.width(), self.height()
        if w <= 0 or h <= 0:
            return

        painter.fillRect(0, 0, w, h, self.BACKGROUND)
        self._draw_grid(painter, w, h)
        if len(self._readings) >= 2:
            self._draw_readings(painter, w, h)
        self._draw_info(painter, w, h)

    def _draw_grid(self, painter: QPainter, w: int, h: int):
        pen = QPen(self.GRID)
        pen.setWidth(1)
        painter.setPen(pen)
        for x in range(0, w + 1, self.GRID_SPACING):
            painter.drawLine(x, 0, x, h)
        for y in range(0, h + 1, self.GRID_SPACING):
            painter.drawLine(0, y, w, y)

    def _draw_readings(self, painter: QPainter, w: int, h: int):
        data_w = w - 2 * self.MARGIN
        data_h = h - 2 * self.MARGIN
        step_x = data_w / (self._max_points - 1)

        points = []
        for i, reading in enumerate(self._readings):
            norm = max(0.0, min(1.0, reading.distance / self._max_range))
            points.append(QPointF(self.MARGIN + i * step_x, self.MARGIN + norm * data_h))

        path = QPainterPath(points[0])
        for p in points[1:]:
            path.lineTo(p)

        pen = QPen(self.LINE)
        pen.setWidth(3)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawPath(path)

        painter.setPen(Qt.NoPen)
        for reading, p in zip(self._readings, points):
            painter.setBrush(self.NEAR if reading.is_near else self.LINE)
            painter.drawEllipse(p, 4, 4)

    def _draw_info(self, painter: QPainter, w: int, h: int):
        painter.setPen(self.TEXT)
        painter.setFont(QFont("Sans", 14))

        last: Optional[object] = self._readings[-1] if self._readings else None
        if last is not None:
            painter.drawText(20, 40, f"Distance: {last.distance:.1f}")
            painter.drawText(20, 80, "NEAR" if last.is_near else "FAR")
            painter.drawText(w - 200, 40, f"Readings: {len(self._readings)}")

        painter.setFont(QFont("Sans", 10))
        title = "Proximity sensor - real time"
        if self._modality_name:
            title += f" ({self._modality_name})"
        painter.drawText(0, h - 30, w, 20, Qt.AlignCenter, title)
