import pytest

from GazeDwell.core.types import Point
from GazeDwell.utils.dwell import DwellEngine

POS = Point(100.0, 100.0)


def test_activation_fires_once_when_progress_reaches_full():
    fired = []
    dwell = DwellEngine(dwell_time_ms=2000, on_activate=fired.append)
    # acquiring tick
    assert dwell.update(POS, "ok", 0.0) is None
    events = []
    for tick in range(1, 16):
        ev = dwell.update(POS, "ok", 200.0)
        if ev is not None:
            events.append((tick, ev))
        if tick < 10:
            assert dwell.progress < 100.0
    assert [t for t, _ in events] == [10]
    assert events[0][1].target_id == "ok"
    assert dwell.progress == 100.0
    assert len(fired) == 1


def test_changing_target_resets_progress():
    dwell = DwellEngine(dwell_time_ms=2000)
    dwell.update(POS, "a", 0.0)
    for _ in range(5):
        dwell.update(POS, "a", 300.0)
    assert dwell.progress == pytest.approx(75.0)
    dwell.update(POS, "b", 300.0)
    assert dwell.target_id == "b"
    assert dwell.progress == 0.0


def test_no_element_keeps_progress_at_zero():
    dwell = DwellEngine(dwell_time_ms=1000)
    for _ in range(5):
        assert dwell.update(POS, None, 500.0) is None
    assert dwell.progress == 0.0


def test_leaving_and_returning_allows_new_activation():
    dwell = DwellEngine(dwell_time_ms=100)
    dwell.update(POS, "a", 0.0)
    assert dwell.update(POS, "a", 150.0) is not None
    assert dwell.update(POS, "a", 150.0) is None
    dwell.update(POS, None, 10.0)
    dwell.update(POS, "a", 0.0)
    assert dwell.update(POS, "a", 150.0) is not None


def test_large_gap_fills_in_one_tick():
    dwell = DwellEngine(dwell_time_ms=1000)
    dwell.update(POS, "a", 0.0)
    assert dwell.update(POS, "a", 5000.0) is not None
    assert dwell.progress == 100.0


def test_suspend_drops_target():
    dwell = DwellEngine(dwell_time_ms=1000)
    dwell.update(POS, "a", 0.0)
    dwell.update(POS, "a", 400.0)
    dwell.suspend()
    assert dwell.target_id is None
    assert dwell.progress == 0.0


def test_negative_elapsed_does_not_rewind():
    dwell = DwellEngine(dwell_time_ms=1000)
    dwell.update(POS, "a", 0.0)
    dwell.update(POS, "a", 500.0)
    dwell.update(POS, "a", -300.0)
    assert dwell.progress == pytest.approx(50.0)


def test_rejects_non_positive_dwell_time():
    with pytest.raises(ValueError):
        DwellEngine(dwell_time_ms=0)
