"""
Relative iris extraction from MediaPipe FaceMesh landmarks.

The iris centre is expressed as a fraction of the eye-socket box spanned by
the two eye corners and the two lids, which cancels head position and
camera distance to first order:

    x = (iris.x - left.x) / (right.x - left.x)
    y = (iris.y - top.y) / (bottom.y - top.y)

"left"/"right" are image-space corners (smaller/larger x). A frame without
a usable face yields None (no signal), never a (0, 0) reading.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from GazeDwell.core.types import Point

LandmarkSet = Mapping[int, Point]


@dataclass(frozen=True)
class EyeLandmarks:
    iris: int
    left: int
    right: int
    top: int
    bottom: int

    def indices(self) -> List[int]:
        return [self.iris, self.left, self.right, self.top, self.bottom]


# refine_landmarks=True indices; 468-472 ring the iris of the eye at 33/133
RIGHT_EYE = EyeLandmarks(iris=468, left=33, right=133, top=159, bottom=145)
LEFT_EYE = EyeLandmarks(iris=473, left=362, right=263, top=386, bottom=374)

EYE_MODES = ("both", "right", "left")
REQUIRED_INDICES = sorted(set(RIGHT_EYE.indices() + LEFT_EYE.indices()))


def _finite(p: Point) -> bool:
    return math.isfinite(p.x) and math.isfinite(p.y)


def relative_iris(landmarks: Optional[LandmarkSet], eye: EyeLandmarks, min_openness: float = 0.0) -> Optional[Point]:
    """Relative iris position for one eye, or None when it cannot be measured."""
    if not landmarks:
        return None
    pts = []
    for idx in eye.indices():
        p = landmarks.get(idx)
        if p is None or not _finite(p):
            return None
        pts.append(p)
    iris, left, right, top, bottom = pts
    width = right.x - left.x
    height = bottom.y - top.y
    if width == 0.0 or height == 0.0:
        return None
    # Blink/closed-eye rejection
    if min_openness > 0.0 and abs(height / width) < min_openness:
        return None
    return Point((iris.x - left.x) / width, (iris.y - top.y) / height)


def normalize(landmarks: Optional[LandmarkSet], eye_mode: str = "both", min_openness: float = 0.0) -> Optional[Point]:
    """Relative iris coordinate for a frame.

    In "both" mode the two eyes are averaged; if only one eye is usable it is
    returned alone. Returns None when no eye can be measured.
    """
    if eye_mode == "right":
        return relative_iris(landmarks, RIGHT_EYE, min_openness)
    if eye_mode == "left":
        return relative_iris(landmarks, LEFT_EYE, min_openness)
    fr = relative_iris(landmarks, RIGHT_EYE, min_openness)
    fl = relative_iris(landmarks, LEFT_EYE, min_openness)
    if fr is None:
        return fl
    if fl is None:
        return fr
    return Point((fr.x + fl.x) / 2.0, (fr.y + fl.y) / 2.0)


def landmarks_from_points(points: Sequence, indices: Iterable[int] = REQUIRED_INDICES) -> Optional[Dict[int, Point]]:
    """Pick the given indices out of a landmark list.

    Accepts anything indexable whose items expose ``.x``/``.y`` (MediaPipe
    NormalizedLandmark) or are ``(x, y)`` pairs. Missing or malformed entries
    are skipped; an empty result is None.
    """
    out: Dict[int, Point] = {}
    n = len(points)
    for i in indices:
        if i < 0 or i >= n:
            continue
        p = points[i]
        try:
            if hasattr(p, "x") and hasattr(p, "y"):
                pt = Point(float(p.x), float(p.y))
            else:
                pt = Point(float(p[0]), float(p[1]))
        except (TypeError, ValueError, IndexError):
            continue
        if _finite(pt):
            out[i] = pt
    return out or None


def landmarks_from_face_mesh(multi_face_landmarks) -> Optional[Dict[int, Point]]:
    """Boundary adapter for ``FaceMesh.process(...).multi_face_landmarks``.

    Only the first face is consumed.
    """
    if not multi_face_landmarks:
        return None
    face = multi_face_landmarks[0]
    points = getattr(face, "landmark", face)
    try:
        return landmarks_from_points(points)
    except TypeError:
        return None
