import pytest

from GazeDwell.calibration.store import CalibrationStore
from GazeDwell.core.types import Point
from GazeDwell.tracking.mapping import GazeMapper, map_gaze

VIEWPORT = (1000, 800)

ANCHORS = [
    (Point(0.0, 0.0), Point(0.3, 0.3)),
    (Point(1.0, 0.0), Point(0.7, 0.3)),
    (Point(0.5, 0.5), Point(0.5, 0.5)),
    (Point(0.0, 1.0), Point(0.3, 0.7)),
    (Point(1.0, 1.0), Point(0.7, 0.7)),
]


def calibrated_store() -> CalibrationStore:
    store = CalibrationStore()
    for target, raw in ANCHORS:
        store.record_anchor(target, raw)
    return store


def test_no_signal_maps_to_none():
    assert map_gaze(None, calibrated_store(), VIEWPORT) is None
    assert map_gaze(None, CalibrationStore(), VIEWPORT) is None


def test_fallback_mirrors_x_only_by_default():
    p = map_gaze(Point(0.25, 0.25), CalibrationStore(), VIEWPORT)
    assert p == Point(0.75 * 1000, 0.25 * 800)


def test_fallback_vertical_flag():
    p = map_gaze(Point(0.25, 0.25), CalibrationStore(), VIEWPORT, fallback_invert_y=True)
    assert p == Point(0.75 * 1000, 0.75 * 800)


def test_fallback_until_five_anchors():
    store = CalibrationStore()
    for target, raw in ANCHORS[:4]:
        store.record_anchor(target, raw)
    p = map_gaze(Point(0.5, 0.5), store, VIEWPORT)
    assert p == Point(500.0, 400.0)
    assert not store.is_ready()


def test_center_maps_to_viewport_center():
    p = map_gaze(Point(0.5, 0.5), calibrated_store(), VIEWPORT)
    assert p.x == pytest.approx(500.0, abs=1e-6)
    assert p.y == pytest.approx(400.0, abs=1e-6)


def test_top_left_raw_maps_to_mirrored_top_right():
    p = map_gaze(Point(0.3, 0.3), calibrated_store(), VIEWPORT)
    assert p.x == pytest.approx(1000.0, abs=1e-6)
    assert p.y == pytest.approx(0.0, abs=1e-6)


def test_calibrated_output_is_clamped_to_viewport():
    store = calibrated_store()
    for rx in (-1.0, 0.0, 0.1, 0.45, 0.9, 1.0, 2.0):
        for ry in (-1.0, 0.0, 0.2, 0.6, 1.0, 3.0):
            p = map_gaze(Point(rx, ry), store, VIEWPORT)
            assert 0.0 <= p.x <= 1000.0
            assert 0.0 <= p.y <= 800.0


def test_degenerate_anchors_use_epsilon_floor():
    store = CalibrationStore()
    for i in range(5):
        store.record_anchor(Point(i / 4.0, 0.5), Point(0.5, 0.5), index=i)
    p = map_gaze(Point(0.55, 0.55), store, VIEWPORT, epsilon=0.1)
    # (0.55 - 0.5) / 0.1 = 0.5 on both axes, X mirrored
    assert p.x == pytest.approx(500.0)
    assert p.y == pytest.approx(400.0)


def test_mapper_reads_viewport_every_call():
    size = {"v": (1000, 800)}
    mapper = GazeMapper(CalibrationStore(), lambda: size["v"])
    assert mapper.map(Point(0.0, 1.0)) == Point(1000.0, 800.0)
    size["v"] = (200, 100)
    assert mapper.map(Point(0.0, 1.0)) == Point(200.0, 100.0)


def test_mapper_rejects_empty_viewport():
    mapper = GazeMapper(CalibrationStore(), lambda: (0, 0))
    with pytest.raises(ValueError):
        mapper.map(Point(0.5, 0.5))
