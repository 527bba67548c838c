import pytest

from GazeDwell.core.types import Point
from GazeDwell.tracking.smoothing import NEUTRAL, AdaptiveSmoother, ExponentialFilter


def test_ema_starts_at_neutral_and_blends():
    f = ExponentialFilter(alpha=0.25)
    assert f.state == NEUTRAL
    out = f.apply(Point(1.0, 0.0))
    assert out.x == pytest.approx(0.5 * 0.75 + 1.0 * 0.25)
    assert out.y == pytest.approx(0.5 * 0.75)


def test_ema_holds_on_no_signal():
    f = ExponentialFilter(alpha=0.5)
    f.apply(Point(0.9, 0.9))
    before = f.state
    assert f.apply(None) is None
    assert f.state == before


def test_ema_reset_returns_to_neutral():
    f = ExponentialFilter(alpha=0.5)
    f.apply(Point(0.1, 0.2))
    f.reset()
    assert f.state == Point(0.5, 0.5)


@pytest.mark.parametrize("alpha", [0.0, 1.0, -0.1, 1.5])
def test_ema_rejects_alpha_out_of_range(alpha):
    with pytest.raises(ValueError):
        ExponentialFilter(alpha=alpha)


def test_adaptive_factor_grows_with_distance_and_caps():
    s = AdaptiveSmoother(base=0.15, cap=0.5, scale_px=1000.0, gain=0.2)
    assert s.factor_for(0.0) == pytest.approx(0.15)
    assert s.factor_for(500.0) == pytest.approx(0.25)
    assert s.factor_for(10000.0) == pytest.approx(0.5)


def test_point_distance():
    assert Point(0.0, 0.0).distance_to(Point(3.0, 4.0)) == 5.0
    assert Point(1.0, 1.0).distance_to(Point(1.0, 1.0)) == 0.0


def test_adaptive_step_toward_target():
    s = AdaptiveSmoother(initial=Point(0.0, 0.0))
    out = s.apply(Point(1000.0, 0.0))
    # distance 1000 -> factor 0.15 + 0.2 = 0.35
    assert out.x == pytest.approx(350.0)
    assert out.y == pytest.approx(0.0)


def test_adaptive_holds_and_reseeds():
    s = AdaptiveSmoother()
    assert s.apply(None) is None
    assert s.apply(Point(10.0, 10.0)) == Point(10.0, 10.0)
    assert s.apply(None) == Point(10.0, 10.0)
    s.reseed(Point(500.0, 400.0))
    assert s.position == Point(500.0, 400.0)
