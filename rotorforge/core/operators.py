"""Simulated operators for headless trials.

An operator plays the human: after every tick it looks at the engine and
returns where the pointer should be for the next one (or None to leave it).
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from rotorforge.core.random_source import RandomSource

Point = Tuple[float, float]


class StaticOperator:
    """Keeps the pointer at one position.

    Args:
        position: Pointer position in px. None leaves the pointer wherever the
            source put it (the canvas centre by default).
    """

    def __init__(self, position: Optional[Point] = None) -> None:
        self.position = tuple(position) if position is not None else None

    def update(self, t_ms: float, engine) -> Optional[Point]:
        return self.position


class FollowingOperator:
    """First-order pursuit of the target with optional tremor.

    The pointer closes the gap to the target with time constant ``lag_ms``.
    With ``chase_probes`` set, a live probe marker replaces the target as the
    goal, which answers probes (and reverses on flip probes).

    Args:
        lag_ms: Pursuit time constant in ms (0 snaps to the goal).
        noise_px: Standard deviation-like amplitude of uniform tremor in px.
        chase_probes: Steer towards live probe markers.
        seed: Seed of the operator's own random source.
    """

    def __init__(
        self,
        lag_ms: float = 120.0,
        noise_px: float = 0.0,
        chase_probes: bool = True,
        seed: Optional[int] = None,
    ) -> None:
        if lag_ms < 0:
            raise ValueError(f"lag_ms must be non-negative, got {lag_ms}")
        self.lag_ms = float(lag_ms)
        self.noise_px = float(noise_px)
        self.chase_probes = chase_probes
        self._random = RandomSource(seed)
        self._last_t: Optional[float] = None
        self._position: Optional[Point] = None

    def update(self, t_ms: float, engine) -> Optional[Point]:
        goal = engine.probe_marker if self.chase_probes else None
        if goal is None:
            goal = engine.target
        if goal is None:
            return None
        if self._position is None:
            self._position = engine.pointer.latest()
        dt = 0.0 if self._last_t is None else max(t_ms - self._last_t, 0.0)
        self._last_t = t_ms
        gain = 1.0 if self.lag_ms == 0 else 1.0 - math.exp(-dt / self.lag_ms)
        x = self._position[0] + gain * (goal[0] - self._position[0])
        y = self._position[1] + gain * (goal[1] - self._position[1])
        self._position = (x, y)
        if self.noise_px > 0:
            return (
                x + self._random.uniform(-self.noise_px, self.noise_px),
                y + self._random.uniform(-self.noise_px, self.noise_px),
            )
        return self._position
