"""
Five-point calibration sequence.

The sequencer walks the canonical targets in order. While a target is
active, every filtered relative-iris sample is buffered and the stare clock
advances by the tick's elapsed time. When the clock reaches the stare
duration, the buffered samples are averaged into one anchor for that target
and the next target begins. After the last target the sequence is complete.

Ticks without a signal do not advance the clock; they restart the current
point's stare so the progress shown never claims completion while the face
is lost. Samples already buffered are kept unless discard_on_signal_loss is
set.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional, Sequence

import numpy as np

from GazeDwell.core.types import Point
from .models import CALIBRATION_TARGETS, CalibrationStatus, CalibrationTarget
from .store import CalibrationStore

logger = logging.getLogger(__name__)

STARE_DURATION_MS = 2500.0


class CalibrationSequencer:
    def __init__(
        self,
        store: CalibrationStore,
        stare_duration_ms: float = STARE_DURATION_MS,
        targets: Sequence[CalibrationTarget] = CALIBRATION_TARGETS,
        discard_on_signal_loss: bool = False,
        max_samples_per_point: int = 600,
    ) -> None:
        if stare_duration_ms <= 0:
            raise ValueError("stare_duration_ms must be positive")
        if not targets:
            raise ValueError("at least one calibration target is required")
        self.store = store
        self.stare_duration_ms = float(stare_duration_ms)
        self.targets = tuple(targets)
        self.discard_on_signal_loss = bool(discard_on_signal_loss)
        self._samples: Deque[Point] = deque(maxlen=max(1, int(max_samples_per_point)))
        self._index = 0
        self._elapsed_ms = 0.0
        self._active = False
        self._complete = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def index(self) -> int:
        return self._index

    @property
    def active(self) -> bool:
        return self._active

    def is_complete(self) -> bool:
        return self._complete

    def current_target(self) -> Optional[CalibrationTarget]:
        if self.is_complete():
            return None
        return self.targets[self._index]

    def progress(self) -> float:
        if self.is_complete():
            return 100.0
        return min(100.0, self._elapsed_ms / self.stare_duration_ms * 100.0)

    def status(self, signal: bool = True) -> CalibrationStatus:
        t = self.current_target()
        return CalibrationStatus(
            index=self._index,
            label=t.label if t is not None else "Complete",
            target=t.point if t is not None else None,
            progress=self.progress(),
            signal=bool(signal),
            complete=self.is_complete(),
            samples=len(self._samples),
        )

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------
    def start(self) -> None:
        self.store.reset()
        self._samples.clear()
        self._index = 0
        self._elapsed_ms = 0.0
        self._active = True
        self._complete = False
        logger.info("calibration started (%d points)", len(self.targets))

    def cancel(self) -> None:
        self._samples.clear()
        self._elapsed_ms = 0.0
        self._active = False

    def update(self, raw: Optional[Point], elapsed_ms: float) -> CalibrationStatus:
        if not self._active or self.is_complete():
            return self.status(signal=raw is not None)

        if raw is None:
            self._elapsed_ms = 0.0
            if self.discard_on_signal_loss:
                self._samples.clear()
            return self.status(signal=False)

        self._samples.append(raw)
        self._elapsed_ms += max(0.0, float(elapsed_ms))
        if self._elapsed_ms >= self.stare_duration_ms:
            self._commit_point()
        return self.status(signal=True)

    def _commit_point(self) -> None:
        target = self.targets[self._index]
        mean = np.array([p.as_tuple() for p in self._samples], dtype=float).mean(axis=0)
        anchor_raw = Point(float(mean[0]), float(mean[1]))
        self.store.record_anchor(target.point, anchor_raw, index=self._index)
        logger.info(
            "calibration point %d (%s) recorded from %d samples: (%.3f, %.3f)",
            self._index, target.label, len(self._samples), anchor_raw.x, anchor_raw.y,
        )
        self._samples.clear()
        self._elapsed_ms = 0.0
        self._index += 1
        if self._index >= len(self.targets):
            self._complete = True
            self._active = False
            logger.info("calibration complete")
