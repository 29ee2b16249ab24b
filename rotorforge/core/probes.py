"""Probe scheduling and the probe response state machine.

The full sequence of probe windows is drawn once at trial start. At run time
:class:`ProbeScheduler` moves through three states::

    armed  --(elapsed >= onset)-------------------> active
    active --(elapsed >= onset + duration)--------> idle   (missed)
    active --(pointer reaches look-ahead marker)--> idle   (hit)

A window is consumed the moment it becomes active and is never reconsidered.
Windows whose whole lifetime elapsed between two ticks are consumed as
missed without ever going live.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from rotorforge.core.random_source import RandomSource

HIT = "hit"
MISSED = "missed"
PENDING = "pending"


@dataclass(frozen=True)
class ColorMapping:
    """Binding of the two probe colours to the ``go`` and ``flip`` roles."""

    go: str
    flip: str

    @classmethod
    def resolve(
        cls,
        colors: Mapping[str, str],
        randomize: bool,
        source: RandomSource,
    ) -> ColorMapping:
        """Bind colours as configured, or swapped with probability 0.5."""
        if randomize and source.chance(0.5):
            return cls(go=colors["flip"], flip=colors["go"])
        return cls(go=colors["go"], flip=colors["flip"])

    def role_of(self, color: str) -> str:
        return "flip" if color == self.flip else "go"

    def to_dict(self) -> Dict[str, str]:
        return {"go": self.go, "flip": self.flip}


@dataclass
class ProbeWindow:
    """One scheduled probe opportunity.

    Attributes:
        index: Position in the schedule.
        onset_ms: Trial time at which the probe goes live.
        duration_ms: How long it stays live without a response.
        color: Marker colour.
        consumed: Set once the window has been activated (or skipped).
        outcome: ``hit``, ``missed`` or None while undecided.
    """

    index: int
    onset_ms: float
    duration_ms: float
    color: str
    consumed: bool = False
    outcome: Optional[str] = None

    @property
    def offset_ms(self) -> float:
        return self.onset_ms + self.duration_ms


@dataclass
class ActiveProbe:
    """The currently live probe."""

    window: ProbeWindow
    offset_ms: float
    is_flip: bool
    responded: bool = False

    @property
    def color(self) -> str:
        return self.window.color


def schedule_probes(
    trial_duration_ms: float,
    probe_duration_ms: float,
    isi_range_ms: Tuple[int, int],
    initial_delay_ms: float,
    mapping: ColorMapping,
    source: RandomSource,
) -> List[ProbeWindow]:
    """Draw the probe windows of a trial.

    Onsets accumulate integer intervals drawn uniformly from
    ``[isi_min, isi_max)`` after ``initial_delay_ms``, and stop before a
    window would run past the end of the trial. Each window independently
    takes the ``flip`` or ``go`` colour with probability 0.5.

    Returns:
        Windows sorted by onset, each with ``onset + duration <= trial_duration_ms``.
    """
    isi_min, isi_max = int(isi_range_ms[0]), int(isi_range_ms[1])
    windows: List[ProbeWindow] = []
    onset = initial_delay_ms + source.randint(isi_min, isi_max)
    while onset + probe_duration_ms <= trial_duration_ms:
        color = mapping.flip if source.chance(0.5) else mapping.go
        windows.append(
            ProbeWindow(
                index=len(windows),
                onset_ms=float(onset),
                duration_ms=float(probe_duration_ms),
                color=color,
            )
        )
        onset += source.randint(isi_min, isi_max)
    return windows


class ProbeScheduler:
    """Tracks which probe window, if any, is live.

    Args:
        windows: Precomputed windows sorted by onset.
        mapping: Colour-role binding of the trial.
    """

    def __init__(self, windows: List[ProbeWindow], mapping: ColorMapping) -> None:
        self.windows = windows
        self.mapping = mapping
        self.active: Optional[ActiveProbe] = None
        self._next = 0

    @classmethod
    def from_config(
        cls, config, mapping: ColorMapping, source: RandomSource
    ) -> ProbeScheduler:
        probes = config.probes
        if not probes.enabled:
            return cls([], mapping)
        windows = schedule_probes(
            trial_duration_ms=config.trial.duration_ms,
            probe_duration_ms=probes.duration_ms,
            isi_range_ms=probes.isi_range_ms,
            initial_delay_ms=probes.initial_delay_ms,
            mapping=mapping,
            source=source,
        )
        return cls(windows, mapping)

    def advance(self, elapsed_ms: float) -> Optional[ActiveProbe]:
        """Apply timeouts and activations for ``elapsed_ms``; returns the live probe."""
        if self.active is not None and elapsed_ms >= self.active.offset_ms:
            self.active.window.outcome = MISSED
            self.active = None

        while self.active is None and self._next < len(self.windows):
            window = self.windows[self._next]
            if elapsed_ms < window.onset_ms:
                break
            self._next += 1
            window.consumed = True
            if elapsed_ms >= window.offset_ms:
                window.outcome = MISSED
                continue
            self.active = ActiveProbe(
                window=window,
                offset_ms=window.offset_ms,
                is_flip=self.mapping.role_of(window.color) == "flip",
            )
        return self.active

    def check_response(
        self,
        pointer: Tuple[float, float],
        marker: Tuple[float, float],
        radius: float,
    ) -> Optional[ActiveProbe]:
        """Register a hit when ``pointer`` is strictly within ``radius`` of ``marker``.

        Returns:
            The probe that was answered, or None.
        """
        probe = self.active
        if probe is None or probe.responded:
            return None
        if math.hypot(marker[0] - pointer[0], marker[1] - pointer[1]) >= radius:
            return None
        probe.responded = True
        probe.window.outcome = HIT
        self.active = None
        return probe

    def outcomes(self) -> List[Dict[str, object]]:
        """Per-window summary; undecided windows report ``pending``."""
        return [
            {
                "index": w.index,
                "onset_ms": w.onset_ms,
                "duration_ms": w.duration_ms,
                "color": w.color,
                "role": self.mapping.role_of(w.color),
                "outcome": w.outcome or PENDING,
            }
            for w in self.windows
        ]
