"""
Webcam landmark source: OpenCV capture feeding MediaPipe FaceMesh.

read() yields the landmark subset the normalizer needs, keyed by FaceMesh
index, or None when no face (or no frame) is available. Only the first face
is used.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

try:
    import cv2  # type: ignore
    import mediapipe as mp  # type: ignore
except Exception:  # pragma: no cover
    cv2 = None  # type: ignore
    mp = None  # type: ignore

from GazeDwell.core.types import Point
from .camera import Camera
from .landmarks import landmarks_from_face_mesh

logger = logging.getLogger(__name__)


class FaceMeshSource:
    def __init__(
        self,
        camera: Optional[Camera] = None,
        min_detection_confidence: float = 0.6,
        min_tracking_confidence: float = 0.6,
    ) -> None:
        if cv2 is None or mp is None:
            raise RuntimeError("mediapipe and OpenCV are required for webcam tracking.")
        self.camera = camera if camera is not None else Camera()
        self._mesh = mp.solutions.face_mesh.FaceMesh(
            max_num_faces=1,
            refine_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def open(self) -> None:
        self.camera.open()

    def close(self) -> None:
        self.camera.close()

    def release(self) -> None:
        self.close()
        self._mesh.close()

    def read(self) -> Optional[Dict[int, Point]]:
        frame = self.camera.read()
        if frame is None:
            return None
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        res = self._mesh.process(rgb)
        return landmarks_from_face_mesh(res.multi_face_landmarks)
