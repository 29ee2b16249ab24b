"""Smoothed random perturbations for the target and the rendered pointer.

Each channel is a first-order exponentially smoothed random walk::

    value <- (1 - alpha) * value + alpha * U(-amp, amp)

A trial owns three channels: angular jitter (added to the phase), radial
jitter (added to the path radius) and pointer jitter (added to the drawn
pointer only). At most one of the two target channels is live per trial.
"""

from __future__ import annotations

from typing import Optional, Tuple

from rotorforge.core.random_source import RandomSource


class SmoothNoise:
    """One smoothed-noise channel.

    Args:
        amp: Half-width of the uniform innovation. Zero disables the channel.
        alpha: Smoothing coefficient in (0, 1].
        source: Random source shared with the rest of the trial.
    """

    def __init__(self, amp: float, alpha: float, source: RandomSource) -> None:
        if not 0 < alpha <= 1:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        if amp < 0:
            raise ValueError(f"amp must be non-negative, got {amp}")
        self.amp = float(amp)
        self.alpha = float(alpha)
        self.value = 0.0
        self._source = source

    @property
    def enabled(self) -> bool:
        return self.amp > 0

    def next(self) -> float:
        """Advance the walk by one step and return the new value."""
        if not self.enabled:
            return self.value
        draw = self._source.uniform(-self.amp, self.amp)
        self.value = (1.0 - self.alpha) * self.value + self.alpha * draw
        return self.value

    def reset_state(self) -> None:
        self.value = 0.0


class TrialJitter:
    """The jitter channels of one trial.

    Args:
        mode: ``"none"``, ``"angle"`` or ``"radial"``.
        amp: Target jitter amplitude (rad for angle, px for radial).
        alpha: Target jitter smoothing.
        pointer_amp: Pointer jitter amplitude in px.
        pointer_alpha: Pointer jitter smoothing.
        source: Trial random source.
    """

    def __init__(
        self,
        mode: str,
        amp: float,
        alpha: float,
        pointer_amp: float,
        pointer_alpha: float,
        source: RandomSource,
    ) -> None:
        self.mode = mode
        self.angle = SmoothNoise(amp if mode == "angle" else 0.0, alpha, source)
        self.radial = SmoothNoise(amp if mode == "radial" else 0.0, alpha, source)
        self.pointer = SmoothNoise(pointer_amp, pointer_alpha, source)

    @classmethod
    def from_config(cls, config, source: RandomSource) -> TrialJitter:
        """Build from a :class:`~rotorforge.config.schema.TrialConfig`."""
        return cls(
            mode=config.jitter.type,
            amp=config.jitter.amp,
            alpha=config.jitter.alpha,
            pointer_amp=config.pointer_jitter.amp,
            pointer_alpha=config.pointer_jitter.alpha,
            source=source,
        )

    def target_offsets(self) -> Tuple[float, float]:
        """Advance the live target channel; returns ``(phase_offset, radius_offset)``."""
        if self.mode == "angle":
            return (self.angle.next(), 0.0)
        if self.mode == "radial":
            return (0.0, self.radial.next())
        return (0.0, 0.0)

    def pointer_offset(self) -> Optional[float]:
        """Advance the pointer channel; None when it is disabled."""
        if not self.pointer.enabled:
            return None
        return self.pointer.next()
