"""
Fullscreen calibration overlay.

Purely a view: the engine's CalibrationSequencer decides when points
advance. The overlay paints the active target at its normalized position,
a stare-progress ring around it, and a warning while no face is detected.
"""
from __future__ import annotations

from typing import Optional

try:
    from PyQt6.QtCore import Qt, QRectF
    from PyQt6.QtGui import QColor, QPainter, QPen
    from PyQt6.QtWidgets import QWidget
except Exception:  # pragma: no cover
    QWidget = object  # type: ignore

from GazeDwell.calibration.models import CalibrationStatus


class CalibrationOverlay(QWidget):  # type: ignore[misc]
    def __init__(self, radius_px: int = 40):  # type: ignore[no-redef]
        super().__init__()
        self.radius_px = radius_px
        self._status: Optional[CalibrationStatus] = None
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)

    def show_status(self, status: CalibrationStatus) -> None:
        self._status = status
        self.update()

    def paintEvent(self, event):  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(2, 6, 23, 240))
        st = self._status
        if st is None or st.target is None:
            painter.end()
            return
        w, h = self.width(), self.height()
        cx, cy = st.target.x * w, st.target.y * h
        r = self.radius_px

        painter.setPen(QColor(255, 255, 255))
        painter.drawText(
            QRectF(0, h * 0.3, w, 40),
            int(Qt.AlignmentFlag.AlignCenter),
            f"Look at the {st.label}  ({st.index + 1}/5)",
        )
        if not st.signal:
            painter.setPen(QColor(251, 113, 133))
            painter.drawText(QRectF(0, h - 80, w, 40), int(Qt.AlignmentFlag.AlignCenter), "FACE NOT DETECTED")

        ring = QRectF(cx - r, cy - r, 2 * r, 2 * r)
        painter.setPen(QPen(QColor(255, 255, 255, 30), 8))
        painter.drawEllipse(ring)
        painter.setPen(QPen(QColor(255, 255, 255), 8))
        # Qt angles are 1/16 degree, counter-clockwise from 3 o'clock
        painter.drawArc(ring, 90 * 16, -int(360 * 16 * st.progress / 100.0))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QColor(255, 255, 255))
        painter.drawEllipse(QRectF(cx - 12, cy - 12, 24, 24))
        painter.setBrush(QColor(59, 130, 246))
        painter.drawEllipse(QRectF(cx - 4, cy - 4, 8, 8))
        painter.end()
