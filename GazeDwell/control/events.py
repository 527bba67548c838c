"""
Per-tick event dataclasses: gaze samples, dwell activations, tick results.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Optional

from GazeDwell.calibration.models import CalibrationStatus
from GazeDwell.core.types import Point


@dataclass(frozen=True)
class GazeSample:
    screen_point: Optional[Point]  # pixels; None when there is no signal
    raw_point: Optional[Point]     # filtered relative iris

    @property
    def has_signal(self) -> bool:
        return self.raw_point is not None


@dataclass(frozen=True)
class ActivationEvent:
    target_id: Hashable
    position: Optional[Point]
    timestamp_ms: float


@dataclass
class TickResult:
    gaze: Optional[GazeSample]
    position: Optional[Point]
    dwell_progress: float
    target_id: Optional[Hashable]
    activation: Optional[ActivationEvent] = None
    calibration: Optional[CalibrationStatus] = None
