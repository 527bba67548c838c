"""
Pointer overlay: transparent, always-on-top, click-through window that
draws the smoothed pointer with a dwell progress ring.
"""
from __future__ import annotations

from typing import Optional

try:
    from PyQt6.QtCore import Qt, QRectF
    from PyQt6.QtGui import QColor, QPainter, QPen
    from PyQt6.QtWidgets import QWidget
except Exception:  # pragma: no cover
    QWidget = object  # type: ignore

from GazeDwell.core.types import Point


class PointerOverlay(QWidget):  # type: ignore[misc]
    def __init__(self, radius_px: int = 20):  # type: ignore[no-redef]
        super().__init__()
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.radius_px = radius_px
        self._pos: Optional[Point] = None
        self._progress = 0.0
        self._has_target = False

    def update_pointer(self, pos: Optional[Point], progress: float, has_target: bool) -> None:
        self._pos = pos
        self._progress = float(progress)
        self._has_target = bool(has_target)
        self.update()

    def paintEvent(self, event):  # type: ignore[override]
        if self._pos is None:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        # Overlay covers the screen; convert global pixels to window-local
        x = self._pos.x - self.x()
        y = self._pos.y - self.y()
        r = self.radius_px
        ring = QRectF(x - r, y - r, 2 * r, 2 * r)
        done = self._progress >= 100.0
        fill = QColor(34, 197, 94, 50) if done else QColor(59, 130, 246, 30 if self._has_target else 12)
        painter.setPen(QPen(QColor(255, 255, 255, 60), 3))
        painter.setBrush(fill)
        painter.drawEllipse(ring)
        if self._progress > 0.0:
            painter.setPen(QPen(QColor(34, 197, 94) if done else QColor(59, 130, 246), 3))
            painter.drawArc(ring, 90 * 16, -int(360 * 16 * self._progress / 100.0))
        painter.end()
