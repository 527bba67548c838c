"""
Settings manager for GazeDwell.

Loads/saves JSON settings from GazeDwell/settings.json and exposes typed
accessors plus an EyeTrackerConfig snapshot for the engine.
"""
from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional


DEFAULTS: Dict[str, Any] = {
    "camera_index": 0,
    "camera": {"resolution": [640, 480], "fps": 30},
    "dwell": {"time_ms": 3000},
    "smoothing": {
        "temporal_alpha": 0.3,
        "base": 0.15,
        "cap": 0.5,
        "scale_px": 1000.0,
        "gain": 0.2,
    },
    "calibration": {
        "stare_ms": 2500,
        "epsilon": 0.1,
        "discard_on_signal_loss": False,
    },
    "mapping": {"fallback_invert_y": False, "sensitivity": 1.0},
    "tracking": {"eye_mode": "both", "min_openness": 0.0},
}


@dataclass
class EyeTrackerConfig:
    dwell_time_ms: float = 3000.0
    temporal_alpha: float = 0.3
    smoothing_factor: float = 0.15
    smoothing_cap: float = 0.5
    smoothing_scale_px: float = 1000.0
    smoothing_gain: float = 0.2
    stare_duration_ms: float = 2500.0
    calibration_epsilon: float = 0.1
    discard_on_signal_loss: bool = False
    fallback_invert_y: bool = False
    # Reserved; the mapping math does not read it yet.
    sensitivity: float = 1.0
    eye_mode: str = "both"
    min_openness: float = 0.0


class SettingsManager:
    def __init__(self, path: Optional[str] = None) -> None:
        if path is None:
            here = os.path.dirname(os.path.abspath(__file__))
            path = os.path.join(os.path.dirname(here), "settings.json")
        self.path = path
        self.data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if not os.path.exists(self.path):
            self.data = copy.deepcopy(DEFAULTS)
            return
        with open(self.path, "r", encoding="utf-8") as f:
            self.data = json.load(f)

    def save(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.data.get(name, {}) or {}

    def _get(self, section: str, key: str) -> Any:
        sec = self._section(section)
        if key in sec:
            return sec[key]
        return DEFAULTS[section][key]

    # Convenience accessors -------------------------------------------------
    def camera_index(self) -> int:
        return int(self.data.get("camera_index", 0))

    def camera_resolution(self) -> tuple[int, int]:
        arr = self._get("camera", "resolution")
        try:
            return int(arr[0]), int(arr[1])
        except (TypeError, ValueError, IndexError):
            return 640, 480

    def camera_fps(self) -> int:
        return int(self._get("camera", "fps"))

    def dwell_time_ms(self) -> float:
        return float(self._get("dwell", "time_ms"))

    def set_dwell_time_ms(self, ms: float) -> None:
        self.data.setdefault("dwell", {})["time_ms"] = float(ms)

    def temporal_alpha(self) -> float:
        return float(self._get("smoothing", "temporal_alpha"))

    def smoothing_factor(self) -> float:
        return float(self._get("smoothing", "base"))

    def stare_duration_ms(self) -> float:
        return float(self._get("calibration", "stare_ms"))

    def fallback_invert_y(self) -> bool:
        return bool(self._get("mapping", "fallback_invert_y"))

    def set_fallback_invert_y(self, on: bool) -> None:
        self.data.setdefault("mapping", {})["fallback_invert_y"] = bool(on)

    def sensitivity(self) -> float:
        return float(self._get("mapping", "sensitivity"))

    def eye_mode(self) -> str:
        mode = str(self._get("tracking", "eye_mode"))
        return mode if mode in ("both", "right", "left") else "both"

    def set_eye_mode(self, mode: str) -> None:
        self.data.setdefault("tracking", {})["eye_mode"] = mode if mode in ("both", "right", "left") else "both"

    def config(self) -> EyeTrackerConfig:
        return EyeTrackerConfig(
            dwell_time_ms=self.dwell_time_ms(),
            temporal_alpha=self.temporal_alpha(),
            smoothing_factor=self.smoothing_factor(),
            smoothing_cap=float(self._get("smoothing", "cap")),
            smoothing_scale_px=float(self._get("smoothing", "scale_px")),
            smoothing_gain=float(self._get("smoothing", "gain")),
            stare_duration_ms=self.stare_duration_ms(),
            calibration_epsilon=float(self._get("calibration", "epsilon")),
            discard_on_signal_loss=bool(self._get("calibration", "discard_on_signal_loss")),
            fallback_invert_y=self.fallback_invert_y(),
            sensitivity=self.sensitivity(),
            eye_mode=self.eye_mode(),
            min_openness=float(self._get("tracking", "min_openness")),
        )
