from __future__ import annotations

import logging
import sys
import time
from typing import Optional, Tuple

try:
    from PyQt6.QtCore import QTimer
    from PyQt6.QtGui import QCursor, QGuiApplication
    from PyQt6.QtWidgets import QApplication, QMessageBox
except Exception:  # pragma: no cover
    QApplication = None  # type: ignore
    QTimer = None  # type: ignore

from GazeDwell.calibration.models import CalibrationStatus
from GazeDwell.control.pointer import screen_size
from GazeDwell.core.engine import TrackingEngine
from GazeDwell.core.settings import SettingsManager
from GazeDwell.core.types import Point, TrackingMode
from GazeDwell.tracking.camera import Camera
from GazeDwell.ui.calibration_ui import CalibrationOverlay
from GazeDwell.ui.hit_test import QtHitTester, activate_widget
from GazeDwell.ui.main_window import MainWindow
from GazeDwell.ui.overlay import PointerOverlay

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 16


class AppCore:
    def __init__(self) -> None:
        self.settings = SettingsManager()
        self.win = MainWindow()
        self.overlay = PointerOverlay()
        self.calibration_ui: Optional[CalibrationOverlay] = None
        self.hit_test = QtHitTester(exclude=[self.overlay])

        self.engine = TrackingEngine(
            config=self.settings.config(),
            viewport=self._viewport,
            hit_test=self.hit_test,
            on_activate=activate_widget,
            source=self._make_source(),
            pointer=self._cursor_pos,
        )

        self.win.enabledToggled.connect(self._on_enabled)  # type: ignore[attr-defined]
        self.win.modeChanged.connect(self._on_mode)  # type: ignore[attr-defined]
        self.win.calibrateRequested.connect(self.start_calibration)  # type: ignore[attr-defined]
        self.win.resetCalibrationRequested.connect(self._on_reset)  # type: ignore[attr-defined]

        self.timer = QTimer()
        self.timer.setInterval(TICK_INTERVAL_MS)
        self.timer.timeout.connect(self._on_tick)  # type: ignore[attr-defined]
        self._last_tick: Optional[float] = None

    def _make_source(self):
        try:
            from GazeDwell.tracking.landmark_source import FaceMeshSource
            w, h = self.settings.camera_resolution()
            cam = Camera(index=self.settings.camera_index(), width=w, height=h, target_fps=self.settings.camera_fps())
            return FaceMeshSource(camera=cam)
        except RuntimeError as e:
            logger.warning("gaze input disabled: %s", e)
            return None

    def _viewport(self) -> Tuple[int, int]:
        screen = QGuiApplication.primaryScreen()
        if screen is None:
            return screen_size()
        geom = screen.geometry()
        return geom.width(), geom.height()

    @staticmethod
    def _cursor_pos() -> Point:
        p = QCursor.pos()
        return Point(float(p.x()), float(p.y()))

    # Controls ----------------------------------------------------------
    def _sync_source(self, title: str) -> None:
        if not self.engine.sync_source():
            QMessageBox.warning(self.win, title, f"Gaze tracking unavailable.\n{self.engine.last_error}")

    def _on_enabled(self, on: bool) -> None:
        self.engine.set_enabled(on)
        self._sync_source("Camera")
        if on:
            self.overlay.setGeometry(QGuiApplication.primaryScreen().geometry())
            self.overlay.show()
        else:
            self.overlay.hide()

    def _on_mode(self, mode: str) -> None:
        self.engine.set_mode(TrackingMode(mode))
        self._sync_source("Camera")

    def start_calibration(self) -> None:
        if not self.engine.initialize():
            QMessageBox.warning(self.win, "Calibration", f"Camera unavailable.\n{self.engine.last_error}")
            return
        status = self.engine.start_calibration()
        self.calibration_ui = CalibrationOverlay()
        self.calibration_ui.show_status(status)
        self.calibration_ui.showFullScreen()

    def _on_reset(self) -> None:
        self.engine.reset_calibration()
        if self.calibration_ui is not None:
            self.calibration_ui.close()
            self.calibration_ui = None
        self.engine.sync_source()

    def _finish_calibration(self) -> None:
        if self.calibration_ui is not None:
            self.calibration_ui.close()
            self.calibration_ui = None
        logger.info("session calibrated")
        self.engine.sync_source()

    # Tick --------------------------------------------------------------
    def _on_tick(self) -> None:
        now = time.perf_counter()
        elapsed_ms = 0.0 if self._last_tick is None else (now - self._last_tick) * 1000.0
        self._last_tick = now

        landmarks = self.engine.poll_landmarks()
        result = self.engine.tick(elapsed_ms, landmarks=landmarks)
        state = self.engine.snapshot()

        calibration: Optional[CalibrationStatus] = result.calibration
        if calibration is not None and self.calibration_ui is not None:
            self.calibration_ui.show_status(calibration)
            if calibration.complete:
                self._finish_calibration()

        if state.enabled:
            self.overlay.update_pointer(state.position, state.dwell_progress, state.target_id is not None)
        self.win.show_state(state, calibration)

    def run(self) -> None:
        self.win.show()
        self.timer.start()


def main() -> int:
    if QApplication is None:
        print("PyQt6 is not installed. Please install dependencies.")
        return 1
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    app = QApplication(sys.argv)
    core = AppCore()
    core.run()
    code = app.exec()
    core.engine.stop()
    return int(code)


if __name__ == "__main__":
    raise SystemExit(main())
