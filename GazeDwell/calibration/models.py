"""
Calibration data models.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from GazeDwell.core.types import Point


@dataclass(frozen=True)
class CalibrationTarget:
    point: Point  # normalized screen position
    label: str


@dataclass
class CalibrationAnchor:
    target: Point  # normalized screen position of the fixation target
    raw: Point     # averaged relative iris while fixating it
    index: Optional[int] = None


@dataclass(frozen=True)
class CalibrationStatus:
    index: int
    label: str
    target: Optional[Point]
    progress: float  # 0..100 for the current point
    signal: bool
    complete: bool
    samples: int = 0


# Presentation order: corners and centre, kept off the screen edge.
CALIBRATION_TARGETS: Tuple[CalibrationTarget, ...] = (
    CalibrationTarget(Point(0.1, 0.1), "Top Left"),
    CalibrationTarget(Point(0.9, 0.1), "Top Right"),
    CalibrationTarget(Point(0.5, 0.5), "Center"),
    CalibrationTarget(Point(0.1, 0.9), "Bottom Left"),
    CalibrationTarget(Point(0.9, 0.9), "Bottom Right"),
)

READY_ANCHOR_COUNT = 5
