"""Integration tests for trial figures."""

import matplotlib

matplotlib.use("Agg")

from matplotlib.figure import Figure  # noqa: E402

from rotorforge.core.harness import run_headless  # noqa: E402
from rotorforge.core.visualization import plot_trial, save_trial_figure  # noqa: E402


class TestPlotTrial:
    """Test figure construction from a real run."""

    def test_two_panels(self, config_factory):
        """The figure has a trace panel and a distance panel with event lines."""
        config = config_factory(key_reverse="r")
        result = run_headless(config, operator="follow", frame_ms=20.0, key_presses=[(800.0, "r")])
        fig = plot_trial(result, on_target_px=25.0)
        assert isinstance(fig, Figure)
        ax_xy, ax_dist = fig.axes
        assert len(ax_xy.lines) == 2
        # distance trace, threshold, one event line
        assert len(ax_dist.lines) == 3
        assert ax_xy.yaxis_inverted()

    def test_empty_result(self, base_config):
        """A result without frames still plots."""
        from rotorforge.core.trial import TrialEngine

        result = TrialEngine(base_config).force_finish()
        fig = plot_trial(result)
        assert len(fig.axes) == 2

    def test_save(self, base_config, tmp_path):
        """save_trial_figure writes an image."""
        result = run_headless(base_config, operator="static", frame_ms=50.0)
        path = save_trial_figure(result, tmp_path / "trial.png")
        assert path.exists() and path.stat().st_size > 0
