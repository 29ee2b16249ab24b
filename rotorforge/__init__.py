"""RotorForge: a real-time pursuit-rotor tracking-trial engine.

A target moves along a parametric path; an operator keeps a pointer on it;
intermittent colour-coded probes may demand a direction reversal. The
engine measures tracking error, handles probes and reversals, and emits a
time-ordered record of the trial.

Key Components:
    - paths: Target path functions (circle, ellipse, custom)
    - core: Jitter, probes, direction control, sampling loop, trial engine
    - config: Canonical trial schema and YAML loading
    - cli: Command-line interface for headless runs and plotting

Example:
    >>> from rotorforge import TrialConfig, TrialEngine
    >>> engine = TrialEngine(TrialConfig())
    >>> engine.tick(0.0)
"""

__version__ = "0.1.0"
__author__ = "RotorForge Contributors"
__license__ = "MIT"

from rotorforge.register_components import register_all

register_all()

from rotorforge.config.schema import TrialConfig, TrialConfigError  # noqa: E402
from rotorforge.core.trial import TrialEngine  # noqa: E402
from rotorforge.core.results import TrialResult  # noqa: E402
from rotorforge.core.harness import run_headless  # noqa: E402
from rotorforge.paths.motion import PathSpec  # noqa: E402

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "TrialConfig",
    "TrialConfigError",
    "TrialEngine",
    "TrialResult",
    "run_headless",
    "PathSpec",
]
