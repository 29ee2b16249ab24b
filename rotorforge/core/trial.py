"""Trial controller: the host-facing driver of one tracking trial.

The host owns scheduling. It calls :meth:`TrialEngine.tick` once per frame
(animation callback, fixed timer or a synchronous test loop) with a
monotonic timestamp in ms, forwards key presses to :meth:`key_event`, and
may stop at any moment with :meth:`force_finish`. Nothing in the engine
blocks or spawns threads.

Example:
    >>> engine = TrialEngine(TrialConfig(), on_finish=store)
    >>> for now in frame_clock():
    ...     if engine.tick(now) is not None:
    ...         break
"""

from __future__ import annotations

import os
import warnings
from datetime import datetime
from typing import Callable, List, Optional

from rotorforge.config.schema import TrialConfig
from rotorforge.core.direction import DirectionController, MotionState
from rotorforge.core.inputs import PointerSource
from rotorforge.core.markers import ShapeSchedule
from rotorforge.core.noise import TrialJitter
from rotorforge.core.probes import ActiveProbe, ColorMapping, ProbeScheduler, ProbeWindow
from rotorforge.core.random_source import RandomSource
from rotorforge.core.render import NullRenderer, Renderer
from rotorforge.core.results import TrialEvent, TrialResult
from rotorforge.core.sampling import SamplingLoop
from rotorforge.paths.motion import Point

IDLE = "idle"
RUNNING = "running"
FINISHED = "finished"


class TrialEngine:
    """Runs one trial from first tick to result.

    States: ``idle -> running -> finished``. The clock starts at the first
    tick; the trial finishes on the first tick at or after the configured
    duration, or when forced. A finished engine ignores further input and
    always returns the same :class:`TrialResult`.

    Args:
        config: Trial configuration; validated here.
        pointer: Pointer source; defaults to one resting at the canvas centre.
        renderer: Receives draw requests; defaults to :class:`NullRenderer`.
        on_finish: Called exactly once with the result.
        random_source: Random source; defaults to one seeded from
            ``config.trial.seed``.
        debug: Print debug lines. ``ROTORFORGE_DEBUG=1`` enables it too.

    Raises:
        TrialConfigError: If the configuration cannot run.
    """

    def __init__(
        self,
        config: TrialConfig,
        pointer: Optional[PointerSource] = None,
        renderer: Optional[Renderer] = None,
        on_finish: Optional[Callable[[TrialResult], None]] = None,
        random_source: Optional[RandomSource] = None,
        debug: bool = False,
    ) -> None:
        config.validate()
        self.config = config
        env_flag = os.getenv("ROTORFORGE_DEBUG", "")
        self._debug_enabled = bool(debug) or env_flag.strip().lower() in {"1", "true", "yes", "on"}

        settings = config.trial
        self.random = random_source or RandomSource(settings.seed)
        self.mapping = ColorMapping.resolve(
            config.probes.colors, config.probes.mapping_randomize, self.random
        )
        self.probes = ProbeScheduler.from_config(config, self.mapping, self.random)
        self.markers = ShapeSchedule.from_config(config, self.random)
        self.direction = DirectionController(settings.direction)
        self.motion = MotionState(settings.omega, self.direction)
        self.path = config.path.resolve(settings.canvas_center)
        self.pointer = pointer or PointerSource(settings.canvas_center)
        self.loop = SamplingLoop(
            config=config,
            path=self.path,
            motion=self.motion,
            jitter=TrialJitter.from_config(config, self.random),
            probes=self.probes,
            markers=self.markers,
            pointer=self.pointer,
            renderer=renderer or NullRenderer(),
            debug=self._debug,
        )
        self._on_finish = on_finish
        self.state = IDLE
        self.start_ms: Optional[float] = None
        self.result: Optional[TrialResult] = None

        self._debug(
            "trial configured",
            duration_ms=settings.duration_ms,
            path=self.path.kind,
            probes=len(self.probes.windows),
            mapping=self.mapping.to_dict(),
            seed=self.random.seed,
        )

    # ------------------------------------------------------------------
    # Host interface
    # ------------------------------------------------------------------

    def tick(self, now_ms: float) -> Optional[TrialResult]:
        """Advance the trial to host time ``now_ms``.

        Returns:
            The result on the tick that finishes the trial (and on any call
            after that), otherwise None.
        """
        if self.state == FINISHED:
            return self.result
        if self.state == IDLE:
            self.start_ms = float(now_ms)
            self.state = RUNNING
            self._debug("trial started", start_ms=self.start_ms)

        elapsed = float(now_ms) - self.start_ms
        last = self.loop.last_elapsed_ms
        if last is not None and elapsed <= last:
            warnings.warn(
                f"TrialEngine: ignoring non-increasing tick (elapsed {elapsed} ms <= {last} ms)",
                RuntimeWarning,
            )
            return None

        self.loop.step(elapsed)
        if elapsed >= self.config.trial.duration_ms:
            return self._finish(self.config.trial.duration_ms, completed=True)
        return None

    def key_event(self, key: str) -> Optional[TrialEvent]:
        """Handle a key press; reverses direction if it is the configured key.

        The reversal takes effect at the latest processed tick, so the next
        recorded frame is the first to show the new direction.

        Returns:
            The recorded reversal event, or None if the key was ignored.
        """
        reverse_key = self.config.trial.key_reverse
        if self.state != RUNNING or reverse_key is None:
            return None
        if str(key).lower() != str(reverse_key).lower():
            return None
        return self.loop.manual_reverse(self.loop.last_elapsed_ms or 0.0, key)

    def force_finish(self, now_ms: Optional[float] = None) -> TrialResult:
        """End the trial now, without another tick.

        The recorded duration is the elapsed time (at ``now_ms`` if given,
        else at the latest tick), capped at the configured duration.
        Calling it on a finished trial returns the existing result unchanged.
        """
        if self.state == FINISHED:
            return self.result
        elapsed = self.loop.last_elapsed_ms or 0.0
        if now_ms is not None and self.start_ms is not None:
            elapsed = max(elapsed, float(now_ms) - self.start_ms)
        duration = min(elapsed, float(self.config.trial.duration_ms))
        self._debug("trial forced to finish", elapsed_ms=round(elapsed, 1))
        return self._finish(duration, completed=False)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def elapsed_ms(self) -> float:
        return self.loop.last_elapsed_ms or 0.0

    @property
    def current_direction(self) -> int:
        return self.direction.value

    @property
    def target(self) -> Optional[Point]:
        """Target position computed on the latest tick."""
        return self.loop.last_target

    @property
    def probe_marker(self) -> Optional[Point]:
        """Where the live, unanswered probe is drawn, or None."""
        probe = self.probes.active
        if probe is None or probe.responded or self.loop.last_elapsed_ms is None:
            return None
        return self.loop.probe_marker(self.motion.phase_at(self.loop.last_elapsed_ms))

    @property
    def active_probe(self) -> Optional[ActiveProbe]:
        return self.probes.active

    @property
    def probe_windows(self) -> List[ProbeWindow]:
        return self.probes.windows

    @property
    def on_target_ms(self) -> float:
        return self.loop.on_target_ms

    # ------------------------------------------------------------------
    # Finish
    # ------------------------------------------------------------------

    def _finish(self, duration_ms: float, completed: bool) -> TrialResult:
        self.state = FINISHED
        on_target = self.loop.on_target_ms
        self.result = TrialResult(
            duration_ms=float(duration_ms),
            on_target_ms=on_target,
            on_target_prop=on_target / duration_ms if duration_ms > 0 else 0.0,
            mapping=self.mapping.to_dict(),
            frames=tuple(self.loop.frames),
            events=tuple(self.loop.events),
            probes=tuple(self.probes.outcomes()),
            shape_switches=tuple(self.markers.to_list()),
            completed=completed,
            seed=self.random.seed,
            metadata=dict(self.config.metadata),
        )
        self._debug(
            "trial finished",
            completed=completed,
            duration_ms=duration_ms,
            on_target_prop=round(self.result.on_target_prop, 4),
            frames=len(self.result.frames),
            events=len(self.result.events),
        )
        if self._on_finish is not None:
            self._on_finish(self.result)
        return self.result

    def _debug(self, message: str, **fields: object) -> None:
        if not getattr(self, "_debug_enabled", False):
            return
        timestamp = datetime.now().strftime("%H:%M:%S")
        details = " ".join(f"{key}={value}" for key, value in fields.items())
        if details:
            print(f"[TrialEngine {timestamp}] {message} | {details}", flush=True)
        else:
            print(f"[TrialEngine {timestamp}] {message}", flush=True)
