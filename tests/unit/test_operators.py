"""Unit tests for simulated operators."""

import math
from types import SimpleNamespace

import pytest

from rotorforge.core.inputs import PointerSource
from rotorforge.core.operators import FollowingOperator, StaticOperator


def _engine(target, marker=None, pointer=(0.0, 0.0)):
    return SimpleNamespace(target=target, probe_marker=marker, pointer=PointerSource(pointer))


class TestStaticOperator:
    """Test the stationary operator."""

    def test_fixed_position(self):
        """Always returns its configured position."""
        op = StaticOperator((5.0, 6.0))
        assert op.update(0.0, _engine((1.0, 1.0))) == (5.0, 6.0)

    def test_leave_pointer(self):
        """Without a position the pointer is left alone."""
        assert StaticOperator().update(0.0, _engine((1.0, 1.0))) is None


class TestFollowingOperator:
    """Test first-order pursuit."""

    def test_zero_lag_snaps(self):
        """lag_ms=0 jumps straight to the target."""
        op = FollowingOperator(lag_ms=0.0)
        assert op.update(0.0, _engine((10.0, 20.0))) == (10.0, 20.0)

    def test_exponential_approach(self):
        """Each update closes 1 - exp(-dt/lag) of the gap."""
        op = FollowingOperator(lag_ms=100.0)
        engine = _engine((100.0, 0.0))
        assert op.update(0.0, engine) == (0.0, 0.0)
        x, y = op.update(100.0, engine)
        assert x == pytest.approx(100.0 * (1.0 - math.exp(-1.0)))
        assert y == 0.0

    def test_chases_probe_marker(self):
        """A live probe marker takes priority over the target."""
        op = FollowingOperator(lag_ms=0.0)
        assert op.update(0.0, _engine((10.0, 0.0), marker=(0.0, 10.0))) == (0.0, 10.0)
        ignoring = FollowingOperator(lag_ms=0.0, chase_probes=False)
        assert ignoring.update(0.0, _engine((10.0, 0.0), marker=(0.0, 10.0))) == (10.0, 0.0)

    def test_no_target_yet(self):
        """Before the first tick there is nothing to follow."""
        assert FollowingOperator().update(0.0, _engine(None)) is None

    def test_tremor_bounded(self):
        """Tremor stays within noise_px of the pursuit position."""
        op = FollowingOperator(lag_ms=0.0, noise_px=2.0, seed=1)
        for t in range(10):
            x, y = op.update(float(t), _engine((50.0, 50.0)))
            assert abs(x - 50.0) <= 2.0 and abs(y - 50.0) <= 2.0

    def test_negative_lag_rejected(self):
        """lag_ms must be non-negative."""
        with pytest.raises(ValueError):
            FollowingOperator(lag_ms=-1.0)
