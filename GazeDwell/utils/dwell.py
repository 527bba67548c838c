"""
Dwell activation.

DwellEngine turns "which element is under the pointer" into progress and a
single activation per continuous hover. Time comes from the caller as
elapsed milliseconds per tick, so a dropped frame just makes the next step
larger.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Hashable, Optional

from GazeDwell.control.events import ActivationEvent
from GazeDwell.core.types import Point

logger = logging.getLogger(__name__)

FULL = 100.0


@dataclass
class DwellState:
    target_id: Optional[Hashable] = None
    progress: float = 0.0
    last_position: Optional[Point] = None


class DwellEngine:
    def __init__(
        self,
        dwell_time_ms: float = 3000.0,
        on_activate: Optional[Callable[[ActivationEvent], None]] = None,
    ) -> None:
        if dwell_time_ms <= 0:
            raise ValueError("dwell_time_ms must be positive")
        self.dwell_time_ms = float(dwell_time_ms)
        self.on_activate = on_activate
        self.state = DwellState()
        self._clock_ms = 0.0

    @property
    def progress(self) -> float:
        return self.state.progress

    @property
    def target_id(self) -> Optional[Hashable]:
        return self.state.target_id

    def reset(self) -> None:
        self.state = DwellState()

    def suspend(self) -> None:
        """Drop the current target, e.g. while the face is lost."""
        self.state.target_id = None
        self.state.progress = 0.0

    def update(self, position: Optional[Point], target_id: Optional[Hashable], elapsed_ms: float) -> Optional[ActivationEvent]:
        elapsed = max(0.0, float(elapsed_ms))
        self._clock_ms += elapsed
        st = self.state
        st.last_position = position

        if target_id != st.target_id:
            st.target_id = target_id
            st.progress = 0.0
            return None

        if target_id is None:
            st.progress = 0.0
            return None

        before = st.progress
        st.progress = min(FULL, before + (elapsed / self.dwell_time_ms) * FULL)
        if before < FULL and st.progress >= FULL:
            event = ActivationEvent(target_id=target_id, position=position, timestamp_ms=self._clock_ms)
            logger.debug("dwell activation on %r", target_id)
            if self.on_activate is not None:
                self.on_activate(event)
            return event
        return None
