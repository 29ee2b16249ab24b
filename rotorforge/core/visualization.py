"""matplotlib figures of a finished trial.

Figures are built with ``matplotlib.figure.Figure`` directly, so no GUI
backend is needed to render or save them.
"""

from pathlib import Path
from typing import Optional, Union

from matplotlib.figure import Figure

from rotorforge.core.results import TrialResult

EVENT_COLORS = {"key_reverse": "tab:orange", "probe_response": "tab:purple"}


def plot_trial(result: TrialResult, on_target_px: Optional[float] = None) -> Figure:
    """Two-panel summary: traces in surface space and distance over time.

    Args:
        result: Finished trial.
        on_target_px: Draw the on-target threshold on the distance panel.

    Returns:
        The figure; save it with ``fig.savefig``.
    """
    data = result.to_numpy()
    fig = Figure(figsize=(11.0, 4.5), dpi=100)
    ax_xy = fig.add_subplot(1, 2, 1)
    ax_dist = fig.add_subplot(1, 2, 2)

    if len(data):
        ax_xy.plot(data[:, 1], data[:, 2], color="0.3", lw=1.0, label="target")
        ax_xy.plot(data[:, 3], data[:, 4], color="tab:cyan", lw=0.8, alpha=0.8, label="pointer")
        ax_dist.plot(data[:, 0], data[:, 5], color="tab:blue", lw=0.8)
        ax_xy.legend(loc="upper right", fontsize=8)
    ax_xy.set_aspect("equal")
    # Surface coordinates: origin top-left, y grows downward.
    ax_xy.invert_yaxis()
    ax_xy.set_xlabel("x (px)")
    ax_xy.set_ylabel("y (px)")

    if on_target_px is not None:
        ax_dist.axhline(on_target_px, color="tab:green", ls="--", lw=0.8, label="on-target")
    for event in result.events:
        ax_dist.axvline(event.t_ms, color=EVENT_COLORS.get(event.kind, "k"), lw=0.8, alpha=0.7)
    ax_dist.set_xlabel("time (ms)")
    ax_dist.set_ylabel("distance (px)")
    ax_dist.set_title(
        f"on target {result.on_target_prop:.1%} of {result.duration_ms:.0f} ms",
        fontsize=10,
    )
    fig.tight_layout()
    return fig


def save_trial_figure(
    result: TrialResult,
    path: Union[str, Path],
    on_target_px: Optional[float] = None,
    dpi: int = 150,
) -> Path:
    """Render :func:`plot_trial` to ``path`` (format from the suffix)."""
    path = Path(path)
    fig = plot_trial(result, on_target_px=on_target_px)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    return path
