"""Canonical configuration schema for RotorForge trials.

A trial is configured by one :class:`TrialConfig`, built once from caller
input (a dict, a YAML document or direct construction) and read-only
thereafter. Mapping fields (``path.params``, ``probes.colors``, ``metadata``)
are copied into read-only proxies at construction. Every sub-config
round-trips through ``to_dict`` / ``from_dict`` so that a YAML file saved
next to a result reproduces the trial.

Example:
    >>> from rotorforge.config.schema import TrialConfig
    >>> config = TrialConfig.from_yaml(open("trial.yml").read())
    >>> config.validate()
    >>> yaml_str = config.to_yaml()
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict, fields
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

import yaml

from rotorforge.paths.motion import CUSTOM_PATH, PathSpec
from rotorforge.registry import PATH_REGISTRY

JITTER_TYPES = ("none", "angle", "radial")
PROBE_ROLES = ("go", "flip")
MARKER_SHAPES = ("circle", "triangle", "square")


class TrialConfigError(ValueError):
    """Raised when a trial configuration cannot be run."""


def _known_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


def _freeze(instance, name: str) -> None:
    """Replace a mapping field of a frozen dataclass with a read-only copy."""
    object.__setattr__(instance, name, MappingProxyType(dict(getattr(instance, name) or {})))


@dataclass(frozen=True)
class TrialSettings:
    """Timing, geometry and tracking parameters.

    Attributes:
        duration_ms: Trial length in ms.
        canvas_size: Surface extent in px, ``int`` (square) or ``(w, h)``.
        target_radius_px: Radius of the drawn target in px.
        on_target_px: Pointer-to-target distance counted as on target.
        omega: Angular velocity in rad/s.
        direction: Initial rotation direction, +1 or -1.
        key_reverse: Key name that reverses direction, or None.
        max_tick_delta_ms: Upper bound on the inter-tick delta credited to
            on-target time.
        sample_interval_ms: Record on a fixed grid with this period instead
            of once per tick.
        seed: Seed for the trial's random source (None = nondeterministic).
    """
    duration_ms: float = 20000.0
    canvas_size: Union[int, Tuple[int, int]] = 600
    target_radius_px: float = 8.0
    on_target_px: float = 25.0
    omega: float = 0.9
    direction: int = 1
    key_reverse: Optional[str] = None
    max_tick_delta_ms: float = 50.0
    sample_interval_ms: Optional[float] = None
    seed: Optional[int] = None

    @property
    def canvas_extent(self) -> Tuple[float, float]:
        if isinstance(self.canvas_size, (int, float)):
            return (float(self.canvas_size), float(self.canvas_size))
        width, height = self.canvas_size
        return (float(width), float(height))

    @property
    def canvas_center(self) -> Tuple[float, float]:
        width, height = self.canvas_extent
        return (width / 2.0, height / 2.0)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        if isinstance(self.canvas_size, tuple):
            result["canvas_size"] = list(self.canvas_size)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TrialSettings:
        kwargs = _known_kwargs(cls, data)
        if isinstance(kwargs.get("canvas_size"), list):
            kwargs["canvas_size"] = tuple(kwargs["canvas_size"])
        return cls(**kwargs)


@dataclass(frozen=True)
class PathConfig:
    """Path shape selection.

    Attributes:
        kind: Registered path name (``circle``, ``ellipse``, ...) or
            ``custom``.
        radius: Base path radius in px.
        center: Path centre in px; None uses the canvas centre.
        params: Kind-specific parameters (e.g. ``aspect`` for ellipses).
        function: Path callable for ``custom``; never serialised.
    """
    kind: str = "circle"
    radius: float = 150.0
    center: Optional[Tuple[float, float]] = None
    params: Mapping[str, float] = field(default_factory=dict)
    function: Optional[Callable] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        _freeze(self, "params")

    def resolve(self, canvas_center: Tuple[float, float]) -> PathSpec:
        """Bind the path to a concrete centre."""
        center = self.center if self.center is not None else canvas_center
        return PathSpec.build(
            self.kind,
            center=center,
            radius=self.radius,
            params=self.params,
            function=self.function,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind,
            "radius": self.radius,
            "params": dict(self.params),
        }
        if self.center is not None:
            result["center"] = list(self.center)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PathConfig:
        kwargs = _known_kwargs(cls, data)
        # Plugin-style "R" inside params is accepted as the base radius.
        params = dict(kwargs.get("params") or {})
        if "R" in params and "radius" not in kwargs:
            kwargs["radius"] = params.pop("R")
        kwargs["params"] = params
        if kwargs.get("center") is not None:
            kwargs["center"] = tuple(kwargs["center"])
        return cls(**kwargs)


@dataclass(frozen=True)
class JitterConfig:
    """Target jitter: one of ``none``, ``angle`` (rad) or ``radial`` (px)."""
    type: str = "none"
    amp: float = 0.0
    alpha: float = 0.07

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> JitterConfig:
        return cls(**_known_kwargs(cls, data))


@dataclass(frozen=True)
class PointerJitterConfig:
    """Cosmetic jitter on the rendered pointer (px)."""
    amp: float = 0.0
    alpha: float = 0.15

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PointerJitterConfig:
        return cls(**_known_kwargs(cls, data))


@dataclass(frozen=True)
class ProbeConfig:
    """Probe scheduling and response parameters.

    Attributes:
        enabled: Whether probes are scheduled at all.
        colors: Mapping of role (``go``, ``flip``) to colour as configured;
            may be swapped at trial start when ``mapping_randomize`` is set.
        ahead_ms: Look-ahead time at which the probe marker is drawn.
        duration_ms: Lifetime of each probe window.
        isi_range_ms: ``(min, max)`` inter-stimulus interval range, integer ms.
        initial_delay_ms: Fixed delay added before the first interval.
        mapping_randomize: Swap the colour roles with probability 0.5.
        hit_tolerance: Multiplier on ``on_target_px`` for probe hits.
        marker_radius_px: Probe marker radius; None derives it from the
            target radius.
    """
    enabled: bool = True
    colors: Mapping[str, str] = field(
        default_factory=lambda: {"go": "#3498db", "flip": "#ffffff"}
    )
    ahead_ms: float = 250.0
    duration_ms: float = 400.0
    isi_range_ms: Tuple[int, int] = (1500, 3500)
    initial_delay_ms: float = 800.0
    mapping_randomize: bool = True
    hit_tolerance: float = 1.2
    marker_radius_px: Optional[float] = None

    def __post_init__(self) -> None:
        _freeze(self, "colors")

    def to_dict(self) -> Dict[str, Any]:
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result["colors"] = dict(self.colors)
        result["isi_range_ms"] = list(self.isi_range_ms)
        return {k: v for k, v in result.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ProbeConfig:
        kwargs = _known_kwargs(cls, data)
        isi = kwargs.get("isi_range_ms")
        if isinstance(isi, dict):
            kwargs["isi_range_ms"] = (isi.get("min"), isi.get("max"))
        elif isi is not None:
            kwargs["isi_range_ms"] = tuple(isi)
        if "colors" in kwargs and kwargs["colors"] is not None:
            kwargs["colors"] = dict(kwargs["colors"])
        return cls(**kwargs)


@dataclass(frozen=True)
class MarkerConfig:
    """Target marker-shape switch schedule (disabled when ``n_switches`` is 0)."""
    n_switches: int = 0
    min_switch_ms: int = 800
    max_switch_ms: int = 1500
    shapes: Tuple[str, ...] = MARKER_SHAPES

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["shapes"] = list(self.shapes)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MarkerConfig:
        kwargs = _known_kwargs(cls, data)
        if kwargs.get("shapes") is not None:
            kwargs["shapes"] = tuple(kwargs["shapes"])
        return cls(**kwargs)


@dataclass(frozen=True)
class TrialConfig:
    """Complete, immutable configuration of one tracking trial.

    Attributes:
        trial: Timing, geometry and tracking settings.
        path: Path shape selection.
        jitter: Target jitter channel.
        pointer_jitter: Cosmetic pointer jitter.
        probes: Probe scheduling and response.
        markers: Marker-shape switch schedule.
        metadata: Free-form labels copied into the result.
    """
    trial: TrialSettings = field(default_factory=TrialSettings)
    path: PathConfig = field(default_factory=PathConfig)
    jitter: JitterConfig = field(default_factory=JitterConfig)
    pointer_jitter: PointerJitterConfig = field(default_factory=PointerJitterConfig)
    probes: ProbeConfig = field(default_factory=ProbeConfig)
    markers: MarkerConfig = field(default_factory=MarkerConfig)
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "metadata")

    def validate(self) -> None:
        """Check that the trial can run.

        Raises:
            TrialConfigError: Listing every problem found.
        """
        errors = []
        t = self.trial
        if t.duration_ms <= 0:
            errors.append(f"trial.duration_ms must be positive, got {t.duration_ms}")
        width, height = t.canvas_extent
        if width <= 0 or height <= 0:
            errors.append(f"trial.canvas_size must be positive, got {t.canvas_size}")
        if t.direction not in (1, -1):
            errors.append(f"trial.direction must be 1 or -1, got {t.direction}")
        if t.on_target_px <= 0:
            errors.append(f"trial.on_target_px must be positive, got {t.on_target_px}")
        if t.target_radius_px <= 0:
            errors.append(
                f"trial.target_radius_px must be positive, got {t.target_radius_px}"
            )
        if t.max_tick_delta_ms <= 0:
            errors.append(
                f"trial.max_tick_delta_ms must be positive, got {t.max_tick_delta_ms}"
            )
        if t.sample_interval_ms is not None and t.sample_interval_ms <= 0:
            errors.append(
                f"trial.sample_interval_ms must be positive, got {t.sample_interval_ms}"
            )
        if t.key_reverse is not None and not str(t.key_reverse).strip():
            errors.append("trial.key_reverse must be a non-empty key name")

        errors.extend(self._path_errors())
        errors.extend(self._jitter_errors())
        errors.extend(self._probe_errors())
        errors.extend(self._marker_errors())

        if errors:
            raise TrialConfigError("Invalid trial configuration:\n  " + "\n  ".join(errors))

    def _path_errors(self) -> Sequence[str]:
        path = self.path
        if path.kind == CUSTOM_PATH:
            if not callable(path.function):
                return ["path.kind 'custom' requires a callable path.function"]
        elif not PATH_REGISTRY.is_registered(path.kind):
            valid = PATH_REGISTRY.list_registered() + [CUSTOM_PATH]
            return [f"unknown path.kind '{path.kind}'. Valid: {valid}"]
        return []

    def _jitter_errors(self) -> Sequence[str]:
        errors = []
        if self.jitter.type not in JITTER_TYPES:
            errors.append(
                f"jitter.type must be one of {list(JITTER_TYPES)}, got '{self.jitter.type}'"
            )
        for name, cfg in (("jitter", self.jitter), ("pointer_jitter", self.pointer_jitter)):
            if cfg.amp < 0:
                errors.append(f"{name}.amp must be non-negative, got {cfg.amp}")
            if not 0 < cfg.alpha <= 1:
                errors.append(f"{name}.alpha must be in (0, 1], got {cfg.alpha}")
        return errors

    def _probe_errors(self) -> Sequence[str]:
        probes = self.probes
        errors = []
        colors = probes.colors or {}
        missing = [role for role in PROBE_ROLES if not colors.get(role)]
        if missing:
            errors.append(f"probes.colors missing role(s): {missing}")
        elif colors["go"] == colors["flip"]:
            errors.append("probes.colors 'go' and 'flip' must differ")
        if not probes.enabled:
            return errors
        if len(probes.isi_range_ms) != 2 or None in probes.isi_range_ms:
            errors.append(f"probes.isi_range_ms must be (min, max), got {probes.isi_range_ms}")
            return errors
        isi_min, isi_max = probes.isi_range_ms
        if isi_min <= 0 or isi_max < isi_min:
            errors.append(f"probes.isi_range_ms must satisfy 0 < min <= max, got {probes.isi_range_ms}")
        if probes.duration_ms <= 0:
            errors.append(f"probes.duration_ms must be positive, got {probes.duration_ms}")
        elif isi_min < probes.duration_ms:
            errors.append(
                f"probes.isi_range_ms min ({isi_min}) must be at least "
                f"probes.duration_ms ({probes.duration_ms}) so windows cannot overlap"
            )
        if probes.ahead_ms < 0:
            errors.append(f"probes.ahead_ms must be non-negative, got {probes.ahead_ms}")
        if probes.initial_delay_ms < 0:
            errors.append(
                f"probes.initial_delay_ms must be non-negative, got {probes.initial_delay_ms}"
            )
        if probes.hit_tolerance <= 0:
            errors.append(f"probes.hit_tolerance must be positive, got {probes.hit_tolerance}")
        return errors

    def _marker_errors(self) -> Sequence[str]:
        markers = self.markers
        if markers.n_switches <= 0:
            return []
        errors = []
        if markers.min_switch_ms <= 0 or markers.max_switch_ms < markers.min_switch_ms:
            errors.append(
                "markers switch range must satisfy 0 < min_switch_ms <= max_switch_ms"
            )
        unknown = [s for s in markers.shapes if s not in MARKER_SHAPES]
        if not markers.shapes or unknown:
            errors.append(f"markers.shapes must be drawn from {list(MARKER_SHAPES)}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        return {
            "metadata": dict(self.metadata),
            "trial": self.trial.to_dict(),
            "path": self.path.to_dict(),
            "jitter": self.jitter.to_dict(),
            "pointer_jitter": self.pointer_jitter.to_dict(),
            "probes": self.probes.to_dict(),
            "markers": self.markers.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TrialConfig:
        """Create from dict (e.g., from YAML).

        Args:
            data: Dictionary with any of the ``trial``, ``path``, ``jitter``,
                ``pointer_jitter``, ``probes``, ``markers`` and ``metadata``
                sections. Missing sections take their defaults.
        """
        return cls(
            trial=TrialSettings.from_dict(data.get("trial") or {}),
            path=PathConfig.from_dict(data.get("path") or {}),
            jitter=JitterConfig.from_dict(data.get("jitter") or {}),
            pointer_jitter=PointerJitterConfig.from_dict(data.get("pointer_jitter") or {}),
            probes=ProbeConfig.from_dict(data.get("probes") or {}),
            markers=MarkerConfig.from_dict(data.get("markers") or {}),
            metadata=dict(data.get("metadata") or {}),
        )

    def to_yaml(self) -> str:
        return yaml.dump(
            self.to_dict(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    @classmethod
    def from_yaml(cls, yaml_str: str) -> TrialConfig:
        data = yaml.safe_load(yaml_str)
        if not isinstance(data, dict):
            raise TrialConfigError("YAML did not produce a dict")
        return cls.from_dict(data)
