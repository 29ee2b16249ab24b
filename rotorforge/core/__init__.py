"""Tracking-trial engine.

Modules:
    random_source: Per-trial seeded random source
    noise: Smoothed jitter channels
    probes: Probe schedule and response state machine
    markers: Target marker-shape schedule
    direction: Direction controller and phase bookkeeping
    sampling: Per-tick sampling pipeline
    trial: Host-facing trial controller (``TrialEngine``)
    results: Frames, events and the trial result
    render: Draw-request interface to the renderer
    inputs: Latest-value pointer source
    operators: Simulated operators for headless runs
    harness: Synchronous fixed-frame driver
    visualization: matplotlib figures of finished trials (import directly)
"""

from .random_source import RandomSource
from .noise import SmoothNoise, TrialJitter
from .probes import ActiveProbe, ColorMapping, ProbeScheduler, ProbeWindow, schedule_probes
from .markers import ShapeSchedule, ShapeSwitch
from .direction import DirectionController, MotionState
from .results import Frame, TrialEvent, TrialResult, load_result, save_result
from .render import DrawRequest, NullRenderer, RecordingRenderer, Renderer
from .inputs import PointerSource
from .sampling import SamplingLoop
from .trial import TrialEngine
from .operators import FollowingOperator, StaticOperator
from .harness import run_headless

__all__ = [
    "RandomSource",
    "SmoothNoise",
    "TrialJitter",
    "ActiveProbe",
    "ColorMapping",
    "ProbeScheduler",
    "ProbeWindow",
    "schedule_probes",
    "ShapeSchedule",
    "ShapeSwitch",
    "DirectionController",
    "MotionState",
    "Frame",
    "TrialEvent",
    "TrialResult",
    "load_result",
    "save_result",
    "DrawRequest",
    "NullRenderer",
    "RecordingRenderer",
    "Renderer",
    "PointerSource",
    "SamplingLoop",
    "TrialEngine",
    "FollowingOperator",
    "StaticOperator",
    "run_headless",
]
