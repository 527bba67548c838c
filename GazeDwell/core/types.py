"""
Shared value types for the gaze pipeline.

Point carries no unit: relative-iris, normalized-screen and pixel
coordinates all use it, and the caller tracks which is which.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Hashable, Optional, Tuple


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return (dx * dx + dy * dy) ** 0.5


class TrackingMode(str, Enum):
    GAZE = "GAZE"
    MOUSE_SIMULATION = "MOUSE_SIMULATION"


@dataclass
class EyeTrackerState:
    """Host-facing snapshot, rewritten by the engine after every tick."""

    position: Point
    enabled: bool = False
    calibrated: bool = False
    dwell_progress: float = 0.0
    target_id: Optional[Hashable] = None
    mode: TrackingMode = TrackingMode.MOUSE_SIMULATION
    face_detected: bool = False
    calibrating: bool = False


# Host-supplied collaborators
ViewportProvider = Callable[[], Tuple[int, int]]
HitTester = Callable[[Point], Optional[Hashable]]
