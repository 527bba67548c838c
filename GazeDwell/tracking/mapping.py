"""
Relative-iris to screen mapping.

Two regimes:
- Fallback (store not ready): crude fixed projection, X mirrored for the
  selfie camera, Y mirrored only on request.
- Calibrated: normalize against the anchor extrema (with an epsilon floor on
  each range), mirror X, clamp to [0, 1] and scale to the viewport.

map_gaze() is pure; GazeMapper only binds configuration and the viewport
provider.
"""
from __future__ import annotations

from typing import Optional, Tuple

from GazeDwell.calibration.store import CalibrationStore
from GazeDwell.core.types import Point, ViewportProvider

DEFAULT_EPSILON = 0.1


def _clamp01(v: float) -> float:
    return min(1.0, max(0.0, v))


def fallback_map(raw: Point, viewport: Tuple[int, int], invert_y: bool = False) -> Point:
    w, h = viewport
    ny = (1.0 - raw.y) if invert_y else raw.y
    return Point((1.0 - raw.x) * w, ny * h)


def calibrated_map(
    raw: Point,
    extrema: Tuple[float, float, float, float],
    viewport: Tuple[int, int],
    epsilon: float = DEFAULT_EPSILON,
) -> Point:
    min_x, max_x, min_y, max_y = extrema
    range_x = max(max_x - min_x, epsilon)
    range_y = max(max_y - min_y, epsilon)
    nx = 1.0 - (raw.x - min_x) / range_x
    ny = (raw.y - min_y) / range_y
    w, h = viewport
    return Point(_clamp01(nx) * w, _clamp01(ny) * h)


def map_gaze(
    raw: Optional[Point],
    store: CalibrationStore,
    viewport: Tuple[int, int],
    *,
    epsilon: float = DEFAULT_EPSILON,
    fallback_invert_y: bool = False,
) -> Optional[Point]:
    """Screen-space pixel point for a filtered relative iris sample.

    Returns None when raw is None (no signal).
    """
    if raw is None:
        return None
    if not store.is_ready():
        return fallback_map(raw, viewport, invert_y=fallback_invert_y)
    return calibrated_map(raw, store.extrema(), viewport, epsilon=epsilon)


class GazeMapper:
    def __init__(
        self,
        store: CalibrationStore,
        viewport: ViewportProvider,
        epsilon: float = DEFAULT_EPSILON,
        fallback_invert_y: bool = False,
        sensitivity: float = 1.0,
    ) -> None:
        self.store = store
        self.viewport = viewport
        self.epsilon = float(epsilon)
        self.fallback_invert_y = bool(fallback_invert_y)
        # Reserved multiplier, not applied to the mapping yet.
        self.sensitivity = float(sensitivity)

    def viewport_size(self) -> Tuple[int, int]:
        w, h = self.viewport()
        if w <= 0 or h <= 0:
            raise ValueError("viewport dimensions must be positive")
        return int(w), int(h)

    def map(self, raw: Optional[Point]) -> Optional[Point]:
        return map_gaze(
            raw,
            self.store,
            self.viewport_size(),
            epsilon=self.epsilon,
            fallback_invert_y=self.fallback_invert_y,
        )
