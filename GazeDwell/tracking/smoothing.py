"""
Smoothing stages for the gaze pipeline.

- ExponentialFilter: fixed-alpha EMA on relative iris coordinates. Holds its
  value (and reports no signal) on None input.
- AdaptiveSmoother: pointer-space EMA whose factor grows with the jump size,
  so saccades converge quickly while fixation jitter stays damped.
"""
from __future__ import annotations

from typing import Optional

from GazeDwell.core.types import Point

NEUTRAL = Point(0.5, 0.5)


class ExponentialFilter:
    def __init__(self, alpha: float = 0.3, initial: Point = NEUTRAL) -> None:
        alpha = float(alpha)
        if not (0.0 < alpha < 1.0):
            raise ValueError("alpha must be in (0, 1)")
        self.alpha = alpha
        self._initial = initial
        self._state = initial

    @property
    def state(self) -> Point:
        return self._state

    def reset(self, to: Optional[Point] = None) -> None:
        self._state = to if to is not None else self._initial

    def apply(self, sample: Optional[Point]) -> Optional[Point]:
        """Blend a sample into the state.

        A None sample leaves the state untouched and returns None so the
        caller sees the gap.
        """
        if sample is None:
            return None
        a = self.alpha
        sx, sy = self._state.x, self._state.y
        self._state = Point(sx * (1.0 - a) + sample.x * a, sy * (1.0 - a) + sample.y * a)
        return self._state


class AdaptiveSmoother:
    def __init__(
        self,
        base: float = 0.15,
        cap: float = 0.5,
        scale_px: float = 1000.0,
        gain: float = 0.2,
        initial: Optional[Point] = None,
    ) -> None:
        if scale_px <= 0:
            raise ValueError("scale_px must be positive")
        self.base = max(0.0, min(1.0, float(base)))
        self.cap = max(self.base, min(1.0, float(cap)))
        self.scale_px = float(scale_px)
        self.gain = float(gain)
        self._pos: Optional[Point] = initial

    @property
    def position(self) -> Optional[Point]:
        return self._pos

    def reseed(self, point: Optional[Point]) -> None:
        self._pos = point

    def factor_for(self, distance: float) -> float:
        return min(self.cap, self.base + (distance / self.scale_px) * self.gain)

    def apply(self, target: Optional[Point]) -> Optional[Point]:
        """Move the smoothed position toward target.

        - First input seeds the state when no seed was given.
        - None holds the current position.
        """
        if target is None:
            return self._pos
        if self._pos is None:
            self._pos = target
            return self._pos
        f = self.factor_for(self._pos.distance_to(target))
        self._pos = Point(
            self._pos.x + (target.x - self._pos.x) * f,
            self._pos.y + (target.y - self._pos.y) * f,
        )
        return self._pos
