"""Trial output records and their persistence.

A finished trial yields one :class:`TrialResult`: summary metrics, the
colour-role mapping actually used, and the ordered per-tick (or per-grid
step) :class:`Frame` sequence with the discrete :class:`TrialEvent` list.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
import torch

FRAME_COLUMNS = (
    "t_ms",
    "target_x",
    "target_y",
    "pointer_x",
    "pointer_y",
    "distance",
    "direction",
)


@dataclass(frozen=True)
class Frame:
    """One recorded observation.

    Attributes:
        t_ms: Trial time of the observation.
        target_x, target_y: Target position in px.
        pointer_x, pointer_y: Pointer position in px (never jittered).
        distance: Euclidean target-pointer distance in px.
        direction: Rotation direction at that instant.
        shape: Target marker shape.
        events: Tags of discrete events attached to this frame.
    """
    t_ms: float
    target_x: float
    target_y: float
    pointer_x: float
    pointer_y: float
    distance: float
    direction: int
    shape: str = "circle"
    events: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["events"] = list(self.events)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Frame:
        data = dict(data)
        data["events"] = tuple(data.get("events") or ())
        return cls(**data)


@dataclass(frozen=True)
class TrialEvent:
    """A direction reversal or probe response.

    Attributes:
        t_ms: Trial time of the event.
        kind: ``key_reverse`` or ``probe_response``.
        direction: Direction after the event.
        is_flip: For probe responses, whether the probe had the flip role.
        key: For manual reversals, the key that was pressed.
        probe_index: For probe responses, the window index.
    """
    t_ms: float
    kind: str
    direction: int
    is_flip: Optional[bool] = None
    key: Optional[str] = None
    probe_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TrialEvent:
        return cls(**data)


@dataclass(frozen=True)
class TrialResult:
    """Output of one trial, assembled once at finish.

    Attributes:
        duration_ms: Configured duration, or the elapsed time for a trial
            finished early.
        on_target_ms: Accumulated on-target time.
        on_target_prop: ``on_target_ms / duration_ms`` (0 for a zero duration).
        mapping: Colour bound to each role, ``{"go": ..., "flip": ...}``.
        frames: Recorded observations in time order.
        events: Reversals and probe responses in time order.
        probes: Per-window schedule and outcome.
        shape_switches: Marker-shape schedule.
        completed: False when the trial was forced to finish early.
        seed: Seed of the trial's random source.
        metadata: Labels copied from the configuration.
    """
    duration_ms: float
    on_target_ms: float
    on_target_prop: float
    mapping: Dict[str, str]
    frames: Tuple[Frame, ...]
    events: Tuple[TrialEvent, ...] = ()
    probes: Tuple[Dict[str, Any], ...] = ()
    shape_switches: Tuple[Dict[str, Any], ...] = ()
    completed: bool = True
    seed: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def probe_responses(self) -> Tuple[TrialEvent, ...]:
        return tuple(e for e in self.events if e.kind == "probe_response")

    def to_numpy(self) -> np.ndarray:
        """Frames as a float array with columns :data:`FRAME_COLUMNS`, shape [n, 7]."""
        if not self.frames:
            return np.zeros((0, len(FRAME_COLUMNS)), dtype=np.float64)
        return np.array(
            [[getattr(f, c) for c in FRAME_COLUMNS] for f in self.frames],
            dtype=np.float64,
        )

    def to_tensor(self) -> torch.Tensor:
        """Frames as a tensor, same layout as :meth:`to_numpy`."""
        return torch.from_numpy(self.to_numpy())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duration_ms": self.duration_ms,
            "on_target_ms": self.on_target_ms,
            "on_target_prop": self.on_target_prop,
            "mapping": dict(self.mapping),
            "completed": self.completed,
            "seed": self.seed,
            "metadata": dict(self.metadata),
            "events": [e.to_dict() for e in self.events],
            "probes": [dict(p) for p in self.probes],
            "shape_switches": [dict(s) for s in self.shape_switches],
            "frames": [f.to_dict() for f in self.frames],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TrialResult:
        return cls(
            duration_ms=data["duration_ms"],
            on_target_ms=data["on_target_ms"],
            on_target_prop=data["on_target_prop"],
            mapping=dict(data["mapping"]),
            frames=tuple(Frame.from_dict(f) for f in data.get("frames", [])),
            events=tuple(TrialEvent.from_dict(e) for e in data.get("events", [])),
            probes=tuple(dict(p) for p in data.get("probes", [])),
            shape_switches=tuple(dict(s) for s in data.get("shape_switches", [])),
            completed=data.get("completed", True),
            seed=data.get("seed"),
            metadata=dict(data.get("metadata") or {}),
        )


def save_result(
    result: TrialResult,
    path: Union[str, Path],
    config: Optional[Dict[str, Any]] = None,
) -> Path:
    """Persist a result as JSON (``.json``) or a torch checkpoint (``.pt``/``.pth``).

    The checkpoint stores the frames matrix as a tensor under ``frames_tensor``
    next to the plain result dict.

    Raises:
        ValueError: For any other suffix.
    """
    path = Path(path)
    payload = result.to_dict()
    if config is not None:
        payload["config"] = config
    suffix = path.suffix.lower()
    if suffix == ".json":
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
    elif suffix in (".pt", ".pth"):
        payload["frames_tensor"] = result.to_tensor()
        payload["frame_columns"] = list(FRAME_COLUMNS)
        torch.save(payload, path)
    else:
        raise ValueError(f"Unsupported result format '{path.suffix}' (use .json, .pt or .pth)")
    return path


def load_result(path: Union[str, Path]) -> TrialResult:
    """Load a result written by :func:`save_result`."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Result file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    elif suffix in (".pt", ".pth"):
        data = torch.load(path, weights_only=False)
    else:
        raise ValueError(f"Unsupported result format '{path.suffix}' (use .json, .pt or .pth)")
    return TrialResult.from_dict(data)
