from __future__ import annotations

from typing import Optional

try:
    from PyQt6.QtCore import pyqtSignal
    from PyQt6.QtWidgets import (
        QCheckBox,
        QComboBox,
        QGridLayout,
        QGroupBox,
        QHBoxLayout,
        QLabel,
        QMainWindow,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    QMainWindow = object  # type: ignore
    pyqtSignal = lambda *a, **k: None  # type: ignore

from GazeDwell.calibration.models import CalibrationStatus
from GazeDwell.core.types import EyeTrackerState, TrackingMode


class MainWindow(QMainWindow):  # type: ignore[misc]
    enabledToggled = pyqtSignal(bool)
    modeChanged = pyqtSignal(str)
    calibrateRequested = pyqtSignal()
    resetCalibrationRequested = pyqtSignal()

    def __init__(self):  # type: ignore[no-redef]
        super().__init__()
        self.setWindowTitle("GazeDwell")
        self._build_ui()

    def _build_ui(self) -> None:
        central = QWidget()
        root = QVBoxLayout()

        controls = QHBoxLayout()
        self.chk_enabled = QCheckBox("Enable pointer")
        self.chk_enabled.toggled.connect(self.enabledToggled.emit)  # type: ignore[attr-defined]
        controls.addWidget(self.chk_enabled)
        self.cmb_mode = QComboBox()
        self.cmb_mode.addItem("Mouse simulation", userData=TrackingMode.MOUSE_SIMULATION.value)
        self.cmb_mode.addItem("Gaze", userData=TrackingMode.GAZE.value)
        self.cmb_mode.currentIndexChanged.connect(  # type: ignore[attr-defined]
            lambda i: self.modeChanged.emit(str(self.cmb_mode.itemData(i)))
        )
        controls.addWidget(self.cmb_mode)
        self.btn_calibrate = QPushButton("Calibrate (5 points)")
        self.btn_calibrate.clicked.connect(self.calibrateRequested.emit)  # type: ignore[attr-defined]
        controls.addWidget(self.btn_calibrate)
        self.btn_reset = QPushButton("Reset calibration")
        self.btn_reset.clicked.connect(self.resetCalibrationRequested.emit)  # type: ignore[attr-defined]
        controls.addWidget(self.btn_reset)
        root.addLayout(controls)

        # Dwell targets
        box = QGroupBox("Dwell targets")
        grid = QGridLayout()
        self.target_buttons = []
        for i in range(6):
            btn = QPushButton(f"Target {i + 1}")
            btn.setMinimumSize(160, 100)
            btn.clicked.connect(lambda _=False, n=i + 1: self._on_target(n))  # type: ignore[attr-defined]
            grid.addWidget(btn, i // 3, i % 3)
            self.target_buttons.append(btn)
        box.setLayout(grid)
        root.addWidget(box, stretch=1)

        self.activation_label = QLabel("Last activation: --")
        root.addWidget(self.activation_label)
        self.status_label = QLabel("Face: -- | Calibrated: -- | Dwell: --")
        root.addWidget(self.status_label)

        central.setLayout(root)
        self.setCentralWidget(central)

    def _on_target(self, n: int) -> None:
        self.activation_label.setText(f"Last activation: Target {n}")

    def show_state(self, state: EyeTrackerState, calibration: Optional[CalibrationStatus] = None) -> None:
        if state.mode == TrackingMode.GAZE:
            face = "ok" if state.face_detected else "NOT DETECTED"
        else:
            face = "n/a"
        text = f"Face: {face} | Calibrated: {'yes' if state.calibrated else 'no'} | Dwell: {state.dwell_progress:.0f}%"
        if calibration is not None and not calibration.complete:
            text += f" | Calibrating {calibration.label}: {calibration.progress:.0f}%"
        self.status_label.setText(text)
