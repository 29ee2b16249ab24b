"""Per-tick sampling pipeline.

One call to :meth:`SamplingLoop.step` is one tick::

    credit delta -> phase -> jitter -> target position -> probe state
    -> pointer -> draw requests -> distance -> on-target time -> record

With ``sample_interval_ms`` set, every tick still renders and accumulates,
but frames are recorded only at grid timestamps ``0, s, 2s, ...`` crossed
since the previous tick, with positions evaluated at the grid timestamp.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional

from rotorforge.core.direction import MANUAL_KEY, PROBE_FLIP, MotionState
from rotorforge.core.inputs import PointerSource
from rotorforge.core.markers import ShapeSchedule
from rotorforge.core.noise import TrialJitter
from rotorforge.core.probes import ActiveProbe, ProbeScheduler
from rotorforge.core.render import (
    POINTER_COLOR,
    POINTER_RADIUS_PX,
    TARGET_COLOR,
    DrawRequest,
    Renderer,
)
from rotorforge.core.results import Frame, TrialEvent
from rotorforge.paths.motion import PathSpec, Point


class SamplingLoop:
    """Owns the per-tick state of a running trial.

    Args:
        config: Validated trial configuration.
        path: Resolved target path.
        motion: Phase/direction state.
        jitter: Jitter channels.
        probes: Probe scheduler.
        markers: Marker-shape schedule.
        pointer: Pointer input source.
        renderer: Receives the draw requests of every tick.
        debug: Optional ``debug(message, **fields)`` callback.
    """

    def __init__(
        self,
        config,
        path: PathSpec,
        motion: MotionState,
        jitter: TrialJitter,
        probes: ProbeScheduler,
        markers: ShapeSchedule,
        pointer: PointerSource,
        renderer: Renderer,
        debug: Optional[Callable[..., None]] = None,
    ) -> None:
        settings = config.trial
        self.duration_ms = float(settings.duration_ms)
        self.on_target_px = float(settings.on_target_px)
        self.target_radius_px = float(settings.target_radius_px)
        self.max_delta_ms = float(settings.max_tick_delta_ms)
        self.sample_interval_ms = settings.sample_interval_ms
        self.probe_ahead_ms = float(config.probes.ahead_ms)
        self.probe_hit_radius = self.on_target_px * float(config.probes.hit_tolerance)
        marker_radius = config.probes.marker_radius_px
        self.probe_radius_px = (
            float(marker_radius)
            if marker_radius is not None
            else max(6.0, self.target_radius_px - 2.0)
        )

        self.path = path
        self.motion = motion
        self.jitter = jitter
        self.probes = probes
        self.markers = markers
        self.pointer = pointer
        self.renderer = renderer
        self._debug = debug or (lambda message, **fields: None)

        self.on_target_ms = 0.0
        self.frames: List[Frame] = []
        self.events: List[TrialEvent] = []
        self.ticks = 0
        self.last_elapsed_ms: Optional[float] = None
        self.last_target: Optional[Point] = None
        self._pending_tags: List[str] = []
        self._next_sample_ms = 0.0
        self._announced_probe: Optional[int] = None

    # ------------------------------------------------------------------
    # Tick pipeline
    # ------------------------------------------------------------------

    def step(self, elapsed_ms: float) -> Point:
        """Run one tick at trial time ``elapsed_ms``; returns the target position."""
        delta = self._credit(elapsed_ms)
        self.last_elapsed_ms = elapsed_ms
        self.ticks += 1

        phase_offset, radius_offset = self.jitter.target_offsets()
        phase = self.motion.phase_at(elapsed_ms)
        target = self.path.position(phase + phase_offset, radius_offset)
        self.last_target = target

        pointer = self.pointer.latest()
        requests: List[DrawRequest] = []
        probe = self.probes.advance(elapsed_ms)
        if probe is not None and probe.window.index != self._announced_probe:
            self._announced_probe = probe.window.index
            self._debug(
                "probe activated",
                onset_ms=probe.window.onset_ms,
                role="flip" if probe.is_flip else "go",
                color=probe.color,
            )
        if probe is not None and not probe.responded:
            marker = self.probe_marker(phase)
            requests.append(
                DrawRequest("probe", marker[0], marker[1], self.probe_radius_px, probe.color)
            )
            answered = self.probes.check_response(pointer, marker, self.probe_hit_radius)
            if answered is not None:
                self._on_probe_response(answered, elapsed_ms)

        shape = self.markers.shape_at(elapsed_ms)
        requests.append(
            DrawRequest("target", target[0], target[1], self.target_radius_px, TARGET_COLOR, shape)
        )
        requests.append(self._pointer_request(pointer))
        self.renderer.draw(elapsed_ms, requests)

        distance = math.hypot(target[0] - pointer[0], target[1] - pointer[1])
        if distance <= self.on_target_px:
            self.on_target_ms += delta

        if self.sample_interval_ms is None:
            self._record(
                elapsed_ms, target, pointer, distance, self.motion.direction_at(elapsed_ms), shape
            )
        else:
            self._record_grid(elapsed_ms, phase_offset, radius_offset, pointer)
        return target

    def probe_marker(self, phase: float) -> Point:
        """Look-ahead point: where the unjittered target will be ``probe_ahead_ms`` from now."""
        ahead = phase + (self.probe_ahead_ms / 1000.0) * self.motion.angular_velocity
        return self.path.position(ahead)

    def _credit(self, elapsed_ms: float) -> float:
        """Clamped tick delta, limited to the configured trial span."""
        if self.last_elapsed_ms is None:
            return 0.0
        span = min(elapsed_ms, self.duration_ms) - min(self.last_elapsed_ms, self.duration_ms)
        return min(max(span, 0.0), self.max_delta_ms)

    def _pointer_request(self, pointer: Point) -> DrawRequest:
        offset = self.jitter.pointer_offset()
        x, y = pointer
        if offset is not None:
            x, y = x + offset, y + offset
        return DrawRequest("pointer", x, y, POINTER_RADIUS_PX, POINTER_COLOR)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _on_probe_response(self, probe: ActiveProbe, elapsed_ms: float) -> None:
        if probe.is_flip:
            self.motion.reverse(elapsed_ms)
        event = TrialEvent(
            t_ms=elapsed_ms,
            kind=PROBE_FLIP,
            direction=self.motion.direction.value,
            is_flip=probe.is_flip,
            probe_index=probe.window.index,
        )
        self._add_event(event)
        self._debug(
            "probe response",
            t_ms=round(elapsed_ms, 1),
            index=probe.window.index,
            is_flip=probe.is_flip,
            direction=event.direction,
        )

    def manual_reverse(self, t_ms: float, key: str) -> TrialEvent:
        """Reverse direction for a key press at trial time ``t_ms``."""
        direction = self.motion.reverse(t_ms)
        event = TrialEvent(t_ms=t_ms, kind=MANUAL_KEY, direction=direction, key=key)
        self._add_event(event)
        self._debug("manual reversal", t_ms=round(t_ms, 1), key=key, direction=direction)
        return event

    def _add_event(self, event: TrialEvent) -> None:
        self.events.append(event)
        self._pending_tags.append(event.kind)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def _record(
        self,
        t_ms: float,
        target: Point,
        pointer: Point,
        distance: float,
        direction: int,
        shape: str,
    ) -> None:
        self.frames.append(
            Frame(
                t_ms=t_ms,
                target_x=target[0],
                target_y=target[1],
                pointer_x=pointer[0],
                pointer_y=pointer[1],
                distance=distance,
                direction=direction,
                shape=shape,
                events=tuple(self._pending_tags),
            )
        )
        self._pending_tags = []

    def _record_grid(
        self,
        elapsed_ms: float,
        phase_offset: float,
        radius_offset: float,
        pointer: Point,
    ) -> None:
        while self._next_sample_ms <= elapsed_ms and self._next_sample_ms < self.duration_ms:
            t = self._next_sample_ms
            target = self.grid_target(t, phase_offset, radius_offset)
            distance = math.hypot(target[0] - pointer[0], target[1] - pointer[1])
            self._record(
                t, target, pointer, distance, self.motion.direction_at(t), self.markers.shape_at(t)
            )
            self._next_sample_ms += self.sample_interval_ms

    def grid_target(self, t_ms: float, phase_offset: float = 0.0, radius_offset: float = 0.0) -> Point:
        """Target position at grid time ``t_ms`` using the tick's jitter offsets."""
        return self.path.position(self.motion.phase_at(t_ms) + phase_offset, radius_offset)
