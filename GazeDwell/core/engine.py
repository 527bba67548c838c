"""
Tracking engine: one explicitly constructed owner for the gaze pipeline.

Per tick (GAZE mode):
    landmarks -> relative iris -> temporal filter
        -> calibration sequencer (while calibrating)
        -> gaze mapper -> position smoother -> dwell engine
MOUSE_SIMULATION mode skips straight to the position smoother with the
pointer device position.

The host drives tick() once per frame with the elapsed milliseconds and
supplies the collaborators: a landmark source (optional), a viewport
provider, a hit tester and an activation sink. All mutable state sits
behind one lock so a host running inference on a worker thread cannot
interleave a tick with a reset or a mode switch.
"""
from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Callable, Hashable, Optional

from GazeDwell.calibration.models import CalibrationStatus
from GazeDwell.calibration.sequencer import CalibrationSequencer
from GazeDwell.calibration.store import CalibrationStore
from GazeDwell.control.events import ActivationEvent, GazeSample, TickResult
from GazeDwell.control.pointer import pointer_position, screen_size
from GazeDwell.tracking.landmarks import LandmarkSet, normalize
from GazeDwell.tracking.mapping import GazeMapper
from GazeDwell.tracking.smoothing import AdaptiveSmoother, ExponentialFilter
from GazeDwell.utils.dwell import DwellEngine
from .settings import EyeTrackerConfig
from .types import EyeTrackerState, HitTester, Point, TrackingMode, ViewportProvider

logger = logging.getLogger(__name__)


def _no_target(_point: Point) -> Optional[Hashable]:
    return None


class TrackingEngine:
    def __init__(
        self,
        config: Optional[EyeTrackerConfig] = None,
        viewport: Optional[ViewportProvider] = None,
        hit_test: Optional[HitTester] = None,
        on_activate: Optional[Callable[[ActivationEvent], None]] = None,
        source=None,
        pointer: Optional[Callable[[], Optional[Point]]] = None,
    ) -> None:
        self.config = config if config is not None else EyeTrackerConfig()
        cfg = self.config
        self.viewport = viewport if viewport is not None else screen_size
        self.hit_test = hit_test if hit_test is not None else _no_target
        self.on_activate = on_activate
        self.source = source
        self.pointer = pointer if pointer is not None else pointer_position

        self.store = CalibrationStore()
        self.filter = ExponentialFilter(alpha=cfg.temporal_alpha)
        self.mapper = GazeMapper(
            self.store,
            self.viewport,
            epsilon=cfg.calibration_epsilon,
            fallback_invert_y=cfg.fallback_invert_y,
            sensitivity=cfg.sensitivity,
        )
        self.smoother = AdaptiveSmoother(
            base=cfg.smoothing_factor,
            cap=cfg.smoothing_cap,
            scale_px=cfg.smoothing_scale_px,
            gain=cfg.smoothing_gain,
            initial=self._center(),
        )
        self.dwell = DwellEngine(dwell_time_ms=cfg.dwell_time_ms, on_activate=self._activate)
        self.sequencer = CalibrationSequencer(
            self.store,
            stare_duration_ms=cfg.stare_duration_ms,
            discard_on_signal_loss=cfg.discard_on_signal_loss,
        )

        self.state = EyeTrackerState(position=self._center())
        self.available = source is not None
        self.last_error: Optional[str] = None
        self._running = False
        self._lock = threading.RLock()

    def _center(self) -> Point:
        w, h = self.viewport()
        return Point(w / 2.0, h / 2.0)

    def _activate(self, event: ActivationEvent) -> None:
        logger.info("activated %r", event.target_id)
        if self.on_activate is not None:
            self.on_activate(event)

    # Lifecycle ----------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self._running

    def initialize(self) -> bool:
        """Open the landmark source. False means tracking is unavailable."""
        if self._running:
            return True
        if self.source is None:
            self.available = False
            self.last_error = "no landmark source"
            logger.warning("no landmark source configured; gaze input unavailable")
            return False
        try:
            self.source.open()
        except RuntimeError as e:
            self.available = False
            self.last_error = str(e)
            logger.error("landmark source unavailable: %s", e)
            return False
        self.available = True
        self.last_error = None
        self._running = True
        logger.info("tracking engine initialized")
        return True

    def pause(self) -> None:
        if self.source is not None and self._running:
            self.source.close()
        self._running = False

    def resume(self) -> bool:
        return self.initialize()

    def needs_landmarks(self) -> bool:
        """True while a calibration runs or the enabled pointer follows gaze."""
        with self._lock:
            st = self.state
            return self.sequencer.active or (st.enabled and st.mode == TrackingMode.GAZE)

    def sync_source(self) -> bool:
        """Open or pause the landmark source to match the current state.

        Returns False only when landmarks are needed and the source cannot
        be opened.
        """
        if self.needs_landmarks():
            return self.initialize()
        if self._running:
            self.pause()
            logger.info("landmark source paused")
        return True

    def stop(self) -> None:
        """Close the source and release its resources. Not restartable."""
        self._running = False
        if self.source is not None:
            self.source.release()
        with self._lock:
            self.dwell.reset()
            self.sequencer.cancel()
            self.state.calibrating = False
        logger.info("tracking engine stopped")

    def poll_landmarks(self) -> Optional[LandmarkSet]:
        if not self._running or self.source is None:
            return None
        return self.source.read()

    # Host controls ------------------------------------------------------
    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.state.enabled = bool(enabled)
            if not enabled:
                self.dwell.reset()
                self.state.dwell_progress = 0.0
                self.state.target_id = None

    def set_mode(self, mode: TrackingMode) -> None:
        """Switch input source and reseed the pointer at the viewport centre."""
        with self._lock:
            mode = TrackingMode(mode)
            center = self._center()
            self.smoother.reseed(center)
            self.dwell.reset()
            self.state.mode = mode
            self.state.position = center
            self.state.dwell_progress = 0.0
            self.state.target_id = None
        logger.info("tracking mode -> %s", mode.value)

    def reset_calibration(self) -> None:
        with self._lock:
            self.sequencer.cancel()
            self.store.reset()
            self.filter.reset()
            self.state.calibrated = False
            self.state.calibrating = False
        logger.info("calibration reset")

    def start_calibration(self) -> CalibrationStatus:
        with self._lock:
            self.filter.reset()
            self.sequencer.start()
            self.dwell.reset()
            self.state.calibrated = False
            self.state.calibrating = True
            self.state.dwell_progress = 0.0
            self.state.target_id = None
            return self.sequencer.status()

    def cancel_calibration(self) -> None:
        with self._lock:
            self.sequencer.cancel()
            self.state.calibrating = False
            self.state.calibrated = self.store.is_ready()

    def snapshot(self) -> EyeTrackerState:
        with self._lock:
            return dataclasses.replace(self.state)

    # Tick ---------------------------------------------------------------
    def tick(
        self,
        elapsed_ms: float,
        landmarks: Optional[LandmarkSet] = None,
        pointer: Optional[Point] = None,
    ) -> TickResult:
        """Evaluate the pipeline once.

        landmarks is ignored in MOUSE_SIMULATION mode unless a calibration is
        running; pointer is ignored in GAZE mode (and read from the pointer
        provider when omitted).
        """
        with self._lock:
            st = self.state
            gaze: Optional[GazeSample] = None

            filtered: Optional[Point] = None
            if st.mode == TrackingMode.GAZE or self.sequencer.active:
                rel = normalize(landmarks, self.config.eye_mode, self.config.min_openness)
                filtered = self.filter.apply(rel)
                st.face_detected = filtered is not None

            if self.sequencer.active:
                # Calibration consumes the filtered stream instead of the pointer
                status = self.sequencer.update(filtered, elapsed_ms)
                if status.complete:
                    st.calibrating = False
                st.calibrated = self.store.is_ready()
                return self._result(GazeSample(None, filtered), calibration=status)

            if st.mode == TrackingMode.GAZE:
                gaze = GazeSample(self.mapper.map(filtered), filtered)
                if not gaze.has_signal:
                    # No signal: hold the pointer and stop accumulating dwell
                    self.dwell.suspend()
                    st.dwell_progress = 0.0
                    st.target_id = None
                    return self._result(gaze)
                candidate = gaze.screen_point
            else:
                candidate = pointer if pointer is not None else self.pointer()

            if not st.enabled:
                return self._result(gaze)

            pos = self.smoother.apply(candidate)
            target = self.hit_test(pos) if pos is not None else None
            activation = self.dwell.update(pos, target, elapsed_ms)
            if pos is not None:
                st.position = pos
            st.dwell_progress = self.dwell.progress
            st.target_id = self.dwell.target_id
            st.calibrated = self.store.is_ready()
            return self._result(gaze, activation=activation)

    def _result(
        self,
        gaze: Optional[GazeSample],
        activation: Optional[ActivationEvent] = None,
        calibration: Optional[CalibrationStatus] = None,
    ) -> TickResult:
        st = self.state
        return TickResult(
            gaze=gaze,
            position=st.position,
            dwell_progress=st.dwell_progress,
            target_id=st.target_id,
            activation=activation,
            calibration=calibration,
        )
