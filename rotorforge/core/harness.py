"""Synchronous driver for running a trial without a display.

Stands in for the browser's animation loop: ticks the engine on a fixed
frame clock, delivers scripted key presses and lets a simulated operator
move the pointer between frames.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple, Union

from tqdm import tqdm

from rotorforge.config.schema import TrialConfig
from rotorforge.core.render import NullRenderer, Renderer
from rotorforge.core.results import TrialResult
from rotorforge.core.trial import TrialEngine
from rotorforge.registry import OPERATOR_REGISTRY


def run_headless(
    config: TrialConfig,
    operator: Union[str, object] = "follow",
    frame_ms: float = 1000.0 / 60.0,
    key_presses: Optional[Iterable[Tuple[float, str]]] = None,
    stop_at_ms: Optional[float] = None,
    renderer: Optional[Renderer] = None,
    progress: bool = False,
    operator_params: Optional[dict] = None,
    debug: bool = False,
) -> TrialResult:
    """Run one trial to completion on a simulated frame clock.

    Args:
        config: Trial configuration.
        operator: Registered operator name or an object with
            ``update(t_ms, engine)``.
        frame_ms: Frame period of the simulated display.
        key_presses: ``(t_ms, key)`` pairs, delivered right after the first tick
            at or after ``t_ms``.
        stop_at_ms: Force the trial to finish at this time.
        renderer: Receives draw requests; defaults to :class:`NullRenderer`.
        progress: Show a tqdm progress bar.
        operator_params: Keyword arguments for a named operator.
        debug: Enable engine debug output.

    Returns:
        The trial result.
    """
    if frame_ms <= 0:
        raise ValueError(f"frame_ms must be positive, got {frame_ms}")
    if isinstance(operator, str):
        operator = OPERATOR_REGISTRY.create(operator, **(operator_params or {}))

    engine = TrialEngine(config, renderer=renderer or NullRenderer(), debug=debug)
    presses = sorted(key_presses or [], key=lambda p: p[0])
    n_frames = int(math.ceil(config.trial.duration_ms / frame_ms)) + 1

    result = None
    with tqdm(total=n_frames, desc="trial", unit="frame", disable=not progress) as bar:
        frame = 0
        while result is None:
            now = frame * frame_ms
            if stop_at_ms is not None and now >= stop_at_ms:
                result = engine.force_finish(stop_at_ms)
                break
            result = engine.tick(now)
            _deliver(engine, presses, now)
            position = operator.update(now, engine)
            if position is not None:
                engine.pointer.update(*position)
            frame += 1
            bar.update(1)
    return result


def _deliver(engine: TrialEngine, presses: list, now: float) -> None:
    while presses and presses[0][0] <= now:
        _, key = presses.pop(0)
        engine.key_event(key)
