"""The gear: a ring you drag around and a disc you tap.

- Dragging on the ring band dials time in or out (see ``RotationTracker``).
- A click inside the ring starts / pauses; a double-click stops.
- The remaining or elapsed time is drawn in the centre.
"""

from __future__ import annotations

import math

from PyQt6.QtCore import Qt, QRectF, QPointF, pyqtSignal
from PyQt6.QtGui import QPainter, QPen, QColor, QFont
from PyQt6.QtWidgets import QWidget

from ..timer.formatting import format_time_interval
from ..timer.gesture import RotationTracker


class GearWidget(QWidget):
    """Custom-painted gear ring with tap and rotate gestures.

    Signals
    -------
    rotated(angle_delta: float)
        Degrees swept since the previous drag sample.
    tapped()
        Single click inside the ring.
    double_tapped()
        Double click inside the ring.
    """

    rotated = pyqtSignal(float)
    tapped = pyqtSignal()
    double_tapped = pyqtSignal()

    GEAR_SIZE = 300
    RING_THICKNESS = 20
    DRAG_SLOP = 4  # px a press may wander and still count as a click

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(self.GEAR_SIZE + 40, self.GEAR_SIZE + 40)

        self._time_text: str = format_time_interval(0)
        self._running: bool = False

        self._ring_color = QColor("gray")
        self._button_color = QColor("white")
        self._text_color = QColor("#1A1A2E")

        self._tracker = RotationTracker(self._center())
        self._press_pos: QPointF | None = None
        self._dragging: bool = False

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC API
    # ══════════════════════════════════════════════════════════════════

    @property
    def time_text(self) -> str:
        return self._time_text

    def set_duration(self, seconds: float) -> None:
        self._time_text = format_time_interval(seconds)
        self.update()

    def set_running(self, running: bool) -> None:
        self._running = running
        self.update()

    # ══════════════════════════════════════════════════════════════════
    #  GEOMETRY
    # ══════════════════════════════════════════════════════════════════

    def _center(self) -> tuple[float, float]:
        return (self.width() / 2, self.height() / 2)

    def _radius(self) -> float:
        return self.GEAR_SIZE / 2

    def _distance_from_center(self, pos: QPointF) -> float:
        cx, cy = self._center()
        return math.hypot(pos.x() - cx, pos.y() - cy)

    def is_on_ring(self, pos: QPointF) -> bool:
        return abs(self._distance_from_center(pos) - self._radius()) <= self.RING_THICKNESS

    def is_on_button(self, pos: QPointF) -> bool:
        return self._distance_from_center(pos) < self._radius() - self.RING_THICKNESS

    # ══════════════════════════════════════════════════════════════════
    #  GESTURES
    # ══════════════════════════════════════════════════════════════════

    def handle_drag(self, start: QPointF, pos: QPointF) -> None:
        self._tracker.center = self._center()
        delta = self._tracker.move((start.x(), start.y()), (pos.x(), pos.y()))
        if delta:
            self.rotated.emit(delta)

    def end_drag(self) -> None:
        self._tracker.end()
        self._dragging = False

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        self._press_pos = event.position()
        self._dragging = False
        event.accept()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if self._press_pos is None:
            super().mouseMoveEvent(event)
            return
        pos = event.position()
        if not self._dragging:
            moved = (pos - self._press_pos).manhattanLength()
            if moved <= self.DRAG_SLOP or not self.is_on_ring(self._press_pos):
                return
            self._dragging = True
        self.handle_drag(self._press_pos, pos)
        event.accept()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if self._press_pos is None:
            super().mouseReleaseEvent(event)
            return
        if self._dragging:
            self.end_drag()
        elif self.is_on_button(self._press_pos):
            self.tapped.emit()
        self._press_pos = None
        event.accept()

    def mouseDoubleClickEvent(self, event) -> None:  # type: ignore[override]
        if self.is_on_button(event.position()):
            self.double_tapped.emit()
            event.accept()
            return
        super().mouseDoubleClickEvent(event)

    # ══════════════════════════════════════════════════════════════════
    #  PAINTING
    # ══════════════════════════════════════════════════════════════════

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        cx, cy = self._center()
        radius = self._radius()
        rect = QRectF(cx - radius, cy - radius, radius * 2, radius * 2)

        # ── button disc ──────────────────────────────────────────────
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(self._button_color)
        painter.drawEllipse(rect)

        # ── gear ring ────────────────────────────────────────────────
        ring_pen = QPen(self._ring_color, self.RING_THICKNESS, Qt.PenStyle.SolidLine)
        if self._running:
            ring_pen.setColor(self._ring_color.darker(130))
        painter.setPen(ring_pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawEllipse(rect)

        # ── centre text ──────────────────────────────────────────────
        font = QFont()
        font.setPixelSize(40)
        font.setWeight(QFont.Weight.Bold)
        painter.setFont(font)
        painter.setPen(self._text_color)
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, self._time_text)

        painter.end()
