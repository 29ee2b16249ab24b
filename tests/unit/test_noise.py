"""Unit tests for smoothed jitter channels."""

import pytest

from rotorforge.config.schema import JitterConfig, PointerJitterConfig, TrialConfig
from rotorforge.core.noise import SmoothNoise, TrialJitter
from rotorforge.core.random_source import RandomSource


class TestSmoothNoise:
    """Test the exponentially smoothed random walk."""

    def test_disabled_channel_stays_at_zero(self):
        """amp=0 never draws and stays at 0."""
        noise = SmoothNoise(0.0, 0.1, RandomSource(1))
        assert not noise.enabled
        assert all(noise.next() == 0.0 for _ in range(10))

    def test_update_rule(self):
        """value <- (1 - alpha) * value + alpha * U(-amp, amp)."""
        noise = SmoothNoise(2.0, 0.25, RandomSource(4))
        replay = RandomSource(4)
        expected = 0.0
        for _ in range(20):
            expected = 0.75 * expected + 0.25 * replay.uniform(-2.0, 2.0)
            assert noise.next() == pytest.approx(expected)

    def test_bounded_by_amp(self):
        """The walk never exceeds its innovation amplitude."""
        noise = SmoothNoise(0.5, 0.3, RandomSource(8))
        assert all(abs(noise.next()) <= 0.5 for _ in range(500))

    def test_invalid_parameters(self):
        """alpha outside (0, 1] and negative amp are rejected."""
        with pytest.raises(ValueError):
            SmoothNoise(1.0, 0.0, RandomSource(1))
        with pytest.raises(ValueError):
            SmoothNoise(-1.0, 0.5, RandomSource(1))

    def test_reset_state(self):
        """reset_state returns the value to 0."""
        noise = SmoothNoise(1.0, 0.5, RandomSource(2))
        noise.next()
        noise.reset_state()
        assert noise.value == 0.0


class TestTrialJitter:
    """Test the channel selection of a trial."""

    def _jitter(self, kind, amp=0.1, pointer_amp=0.0):
        config = TrialConfig(
            jitter=JitterConfig(type=kind, amp=amp),
            pointer_jitter=PointerJitterConfig(amp=pointer_amp),
        )
        return TrialJitter.from_config(config, RandomSource(0))

    def test_none_mode(self):
        """No target jitter yields zero offsets."""
        jitter = self._jitter("none")
        assert jitter.target_offsets() == (0.0, 0.0)
        assert jitter.pointer_offset() is None

    def test_angle_mode_only_moves_phase(self):
        """Angular jitter perturbs the phase only."""
        jitter = self._jitter("angle")
        offsets = [jitter.target_offsets() for _ in range(10)]
        assert all(r == 0.0 for _, r in offsets)
        assert any(p != 0.0 for p, _ in offsets)
        assert not jitter.radial.enabled

    def test_radial_mode_only_moves_radius(self):
        """Radial jitter perturbs the radius only."""
        jitter = self._jitter("radial", amp=3.0)
        offsets = [jitter.target_offsets() for _ in range(10)]
        assert all(p == 0.0 for p, _ in offsets)
        assert any(r != 0.0 for _, r in offsets)

    def test_pointer_channel(self):
        """Pointer jitter produces an offset when enabled."""
        jitter = self._jitter("none", pointer_amp=2.0)
        values = [jitter.pointer_offset() for _ in range(10)]
        assert all(v is not None and abs(v) <= 2.0 for v in values)
