"""
Camera abstraction using OpenCV VideoCapture.

- Opens the requested webcam index, falling back to the next indices
- Requests a resolution/FPS hint (drivers may ignore it)
- read() returns a BGR frame or None; it never sleeps, pacing belongs to
  whoever drives the ticks
"""
from __future__ import annotations

import logging
from typing import Optional

try:
    import cv2  # type: ignore
except Exception:  # pragma: no cover
    cv2 = None

logger = logging.getLogger(__name__)


class Camera:
    def __init__(self, index: int = 0, width: int = 640, height: int = 480, target_fps: int = 30) -> None:
        self.index = int(index)
        self.width = int(width)
        self.height = int(height)
        self.target_fps = max(1, int(target_fps))
        self.cap = None

    def open(self) -> None:
        if cv2 is None:
            raise RuntimeError("OpenCV (cv2) is not installed.")
        if self.is_open:
            return
        candidates = [self.index] + [i for i in range(0, 4) if i != self.index]
        for idx in candidates:
            cap = cv2.VideoCapture(idx)
            if cap is not None and cap.isOpened():
                self.cap = cap
                self.index = idx
                break
            if cap is not None:
                cap.release()
        if self.cap is None:
            tried = ", ".join(str(i) for i in candidates)
            raise RuntimeError(f"No camera detected. Tried indices: {tried}")

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self.cap.set(cv2.CAP_PROP_FPS, float(self.target_fps))
        actual_w = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_h = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if actual_w > 0 and actual_h > 0:
            self.width, self.height = actual_w, actual_h
        logger.info("camera %d opened at %dx%d", self.index, self.width, self.height)

    def read(self) -> Optional[object]:
        if self.cap is None:
            return None
        ok, frame = self.cap.read()
        if not ok or frame is None:
            return None
        return frame

    def close(self) -> None:
        if self.cap is not None:
            try:
                self.cap.release()
            finally:
                self.cap = None

    @property
    def is_open(self) -> bool:
        return bool(self.cap is not None and self.cap.isOpened())
