"""
Calibration anchor store.

Holds at most one anchor per key. The key is the calibration-sequence index
when the writer supplies one, otherwise the target point itself. Writing an
existing key replaces its raw value in place.
"""
from __future__ import annotations

from typing import Dict, Hashable, List, Optional, Tuple

import numpy as np

from GazeDwell.core.types import Point
from .models import CalibrationAnchor, READY_ANCHOR_COUNT


class CalibrationStore:
    def __init__(self, ready_count: int = READY_ANCHOR_COUNT) -> None:
        self.ready_count = int(ready_count)
        self._anchors: Dict[Hashable, CalibrationAnchor] = {}

    def __len__(self) -> int:
        return len(self._anchors)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def record_anchor(self, target: Point, raw: Point, index: Optional[int] = None) -> CalibrationAnchor:
        key: Hashable = ("index", int(index)) if index is not None else ("target", target)
        anchor = self._anchors.get(key)
        if anchor is None:
            anchor = CalibrationAnchor(target=target, raw=raw, index=index)
            self._anchors[key] = anchor
        else:
            anchor.target = target
            anchor.raw = raw
        return anchor

    def reset(self) -> None:
        self._anchors.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_ready(self) -> bool:
        return len(self._anchors) >= self.ready_count

    def anchors(self) -> List[CalibrationAnchor]:
        return list(self._anchors.values())

    def extrema(self) -> Tuple[float, float, float, float]:
        """Return (min_x, max_x, min_y, max_y) over the raw samples."""
        if not self._anchors:
            raise ValueError("calibration store is empty")
        raw = np.array([a.raw.as_tuple() for a in self._anchors.values()], dtype=float)
        mins = raw.min(axis=0)
        maxs = raw.max(axis=0)
        return float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1])
