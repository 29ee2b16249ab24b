"""Unit tests for the marker-shape schedule."""

from rotorforge.config.schema import MarkerConfig, TrialConfig, TrialSettings
from rotorforge.core.markers import ShapeSchedule, ShapeSwitch
from rotorforge.core.random_source import RandomSource


class TestShapeSchedule:
    """Test shape switch generation and lookup."""

    def test_disabled_by_default(self):
        """n_switches=0 yields an always-circle schedule."""
        schedule = ShapeSchedule.from_config(TrialConfig(), RandomSource(0))
        assert schedule.switches == []
        assert schedule.shape_at(15000.0) == "circle"

    def test_switch_times(self):
        """Switch times accumulate within the configured range and the trial."""
        config = TrialConfig(
            trial=TrialSettings(duration_ms=5000.0),
            markers=MarkerConfig(n_switches=10, min_switch_ms=800, max_switch_ms=1500),
        )
        schedule = ShapeSchedule.from_config(config, RandomSource(6))
        times = [s.t_ms for s in schedule.switches]
        assert 0 < len(times) <= 10
        assert all(t < 5000.0 for t in times)
        gaps = [b - a for a, b in zip([0.0] + times, times)]
        assert all(800 <= g < 1500 for g in gaps)
        assert {s.shape for s in schedule.switches} <= {"circle", "triangle", "square"}

    def test_shape_at(self):
        """The latest reached switch sets the shape."""
        schedule = ShapeSchedule(
            [ShapeSwitch(0, 1000.0, "square"), ShapeSwitch(1, 2000.0, "triangle")]
        )
        assert schedule.shape_at(999.0) == "circle"
        assert schedule.shape_at(1000.0) == "square"
        assert schedule.shape_at(2500.0) == "triangle"
        assert schedule.to_list()[1] == {"index": 1, "t_ms": 2000.0, "shape": "triangle"}
