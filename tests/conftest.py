from typing import Dict

import pytest

from GazeDwell.core.types import Point


def landmarks_for(rx: float, ry: float) -> Dict[int, Point]:
    """Synthetic FaceMesh subset with both irises at relative (rx, ry)."""
    pts: Dict[int, Point] = {}
    # right eye box x 0.30..0.40, y 0.38..0.42
    pts[33] = Point(0.30, 0.40)
    pts[133] = Point(0.40, 0.40)
    pts[159] = Point(0.35, 0.38)
    pts[145] = Point(0.35, 0.42)
    pts[468] = Point(0.30 + rx * 0.10, 0.38 + ry * 0.04)
    # left eye box x 0.60..0.70, y 0.38..0.42
    pts[362] = Point(0.60, 0.40)
    pts[263] = Point(0.70, 0.40)
    pts[386] = Point(0.65, 0.38)
    pts[374] = Point(0.65, 0.42)
    pts[473] = Point(0.60 + rx * 0.10, 0.38 + ry * 0.04)
    return pts


@pytest.fixture
def make_landmarks():
    return landmarks_for
