from types import SimpleNamespace

import pytest

from GazeDwell.core.types import Point
from GazeDwell.tracking.landmarks import (
    LEFT_EYE,
    RIGHT_EYE,
    landmarks_from_face_mesh,
    landmarks_from_points,
    normalize,
    relative_iris,
)


def test_relative_iris_formula(make_landmarks):
    lm = make_landmarks(0.25, 0.75)
    p = relative_iris(lm, RIGHT_EYE)
    assert p is not None
    assert p.x == pytest.approx(0.25)
    assert p.y == pytest.approx(0.75)


def test_normalize_averages_both_eyes(make_landmarks):
    lm = dict(make_landmarks(0.4, 0.5))
    # shift only the left iris
    lm[473] = Point(0.60 + 0.6 * 0.10, 0.38 + 0.5 * 0.04)
    p = normalize(lm)
    assert p.x == pytest.approx(0.5)
    assert p.y == pytest.approx(0.5)
    assert normalize(lm, eye_mode="right").x == pytest.approx(0.4)
    assert normalize(lm, eye_mode="left").x == pytest.approx(0.6)


def test_no_face_is_no_signal():
    assert normalize(None) is None
    assert normalize({}) is None


def test_missing_index_falls_back_to_other_eye(make_landmarks):
    lm = dict(make_landmarks(0.3, 0.6))
    del lm[468]
    p = normalize(lm)
    assert p.x == pytest.approx(0.3)
    del lm[473]
    assert normalize(lm) is None


def test_degenerate_socket_is_no_signal(make_landmarks):
    lm = dict(make_landmarks(0.5, 0.5))
    lm[133] = lm[33]
    assert relative_iris(lm, RIGHT_EYE) is None
    lm[374] = lm[386]
    assert relative_iris(lm, LEFT_EYE) is None


def test_non_finite_is_no_signal(make_landmarks):
    lm = dict(make_landmarks(0.5, 0.5))
    lm[468] = Point(float("nan"), 0.4)
    assert relative_iris(lm, RIGHT_EYE) is None


def test_blink_rejection(make_landmarks):
    lm = make_landmarks(0.5, 0.5)
    # box is 0.10 wide, 0.04 high -> openness 0.4
    assert relative_iris(lm, RIGHT_EYE, min_openness=0.3) is not None
    assert relative_iris(lm, RIGHT_EYE, min_openness=0.5) is None


def test_landmarks_from_points_accepts_objects_and_pairs():
    pts = [SimpleNamespace(x=i / 1000.0, y=0.5) for i in range(478)]
    out = landmarks_from_points(pts)
    assert out[468] == Point(0.468, 0.5)
    assert 0 not in out

    pairs = [(0.1, 0.2)] * 200
    short = landmarks_from_points(pairs)
    assert short[33] == Point(0.1, 0.2)
    assert 468 not in short


def test_face_mesh_adapter_uses_first_face(make_landmarks):
    first = SimpleNamespace(landmark=[SimpleNamespace(x=0.1, y=0.1)] * 478)
    second = SimpleNamespace(landmark=[SimpleNamespace(x=0.9, y=0.9)] * 478)
    out = landmarks_from_face_mesh([first, second])
    assert out[468] == Point(0.1, 0.1)
    assert landmarks_from_face_mesh(None) is None
    assert landmarks_from_face_mesh([]) is None
