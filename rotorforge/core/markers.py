"""Scheduled changes of the target marker shape."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, List, Sequence

from rotorforge.core.random_source import RandomSource

DEFAULT_SHAPE = "circle"


@dataclass(frozen=True)
class ShapeSwitch:
    index: int
    t_ms: float
    shape: str


class ShapeSchedule:
    """Piecewise-constant marker shape over trial time.

    The target starts as a circle and takes the shape of the latest switch
    whose time has been reached.
    """

    def __init__(self, switches: Sequence[ShapeSwitch]) -> None:
        self.switches = list(switches)
        self._times = [s.t_ms for s in self.switches]

    @classmethod
    def build(
        cls,
        duration_ms: float,
        n_switches: int,
        min_switch_ms: int,
        max_switch_ms: int,
        shapes: Sequence[str],
        source: RandomSource,
    ) -> ShapeSchedule:
        """Draw up to ``n_switches`` switches at cumulative random intervals."""
        switches: List[ShapeSwitch] = []
        t = 0
        for i in range(n_switches):
            t += source.randint(min_switch_ms, max_switch_ms)
            if t >= duration_ms:
                break
            switches.append(ShapeSwitch(index=i, t_ms=float(t), shape=source.choice(shapes)))
        return cls(switches)

    @classmethod
    def from_config(cls, config, source: RandomSource) -> ShapeSchedule:
        markers = config.markers
        if markers.n_switches <= 0:
            return cls([])
        return cls.build(
            duration_ms=config.trial.duration_ms,
            n_switches=markers.n_switches,
            min_switch_ms=markers.min_switch_ms,
            max_switch_ms=markers.max_switch_ms,
            shapes=markers.shapes,
            source=source,
        )

    def shape_at(self, elapsed_ms: float) -> str:
        idx = bisect_right(self._times, elapsed_ms)
        return self.switches[idx - 1].shape if idx else DEFAULT_SHAPE

    def to_list(self) -> List[Dict[str, object]]:
        return [{"index": s.index, "t_ms": s.t_ms, "shape": s.shape} for s in self.switches]
