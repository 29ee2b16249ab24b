"""Rotation direction and phase bookkeeping."""

from __future__ import annotations

from bisect import bisect_right
from typing import List, Tuple

MANUAL_KEY = "key_reverse"
PROBE_FLIP = "probe_response"


class DirectionController:
    """Holds the signed rotation direction (+1 or -1).

    Only two causes toggle it: a manual reversal key and a ``flip`` probe
    response. Callers record the toggle; this class only flips the sign.
    """

    def __init__(self, initial: int = 1) -> None:
        if initial not in (1, -1):
            raise ValueError(f"direction must be 1 or -1, got {initial}")
        self.value = initial
        self.initial = initial
        self.toggles = 0

    def toggle(self) -> int:
        """Reverse the direction and return the new value."""
        self.value = -self.value
        self.toggles += 1
        return self.value


class MotionState:
    """Phase of the target as a function of trial time.

    Within a segment ``phase(t) = phase_origin + sign * omega * (t - time_origin) / 1000``.
    Each reversal opens a new segment anchored at the current phase, so the
    target turns around in place. Earlier segments are kept so that phases
    at past timestamps (fixed-grid samples) stay exact.

    Args:
        omega: Angular speed in rad/s.
        direction: Controller owning the sign.
        phase_origin: Phase at trial time 0 (rad).
    """

    def __init__(self, omega: float, direction: DirectionController, phase_origin: float = 0.0) -> None:
        self.omega = float(omega)
        self.direction = direction
        # (time_origin_ms, phase_origin, sign)
        self._segments: List[Tuple[float, float, int]] = [(0.0, float(phase_origin), direction.value)]
        self._starts = [0.0]

    @property
    def phase_origin(self) -> float:
        return self._segments[-1][1]

    @property
    def time_origin(self) -> float:
        return self._segments[-1][0]

    @property
    def angular_velocity(self) -> float:
        """Current signed angular velocity in rad/s."""
        return self.omega * self.direction.value

    def _segment(self, elapsed_ms: float) -> Tuple[float, float, int]:
        idx = bisect_right(self._starts, elapsed_ms)
        return self._segments[max(idx - 1, 0)]

    def phase_at(self, elapsed_ms: float) -> float:
        t0, phase0, sign = self._segment(elapsed_ms)
        return phase0 + sign * self.omega * (elapsed_ms - t0) / 1000.0

    def direction_at(self, elapsed_ms: float) -> int:
        return self._segment(elapsed_ms)[2]

    def reverse(self, elapsed_ms: float) -> int:
        """Toggle direction at ``elapsed_ms``, keeping the phase continuous.

        ``elapsed_ms`` must not precede the last reversal.
        """
        elapsed_ms = max(float(elapsed_ms), self.time_origin)
        phase = self.phase_at(elapsed_ms)
        new_direction = self.direction.toggle()
        if elapsed_ms == self.time_origin:
            self._segments[-1] = (elapsed_ms, phase, new_direction)
        else:
            self._segments.append((elapsed_ms, phase, new_direction))
            self._starts.append(elapsed_ms)
        return new_direction
