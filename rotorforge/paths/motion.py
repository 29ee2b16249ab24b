"""Target motion paths.

A path is a pure function ``fn(phase, params) -> (x, y)`` where ``phase`` is a
signed, unbounded angle in radians and ``params`` is a mapping that always
carries the path centre (``cx``, ``cy``) and base radius (``R``) plus any
kind-specific entries. Because the functions hold no state, displaced phases
(angular jitter, probe look-ahead) and displaced radii (radial jitter) reuse
them directly.

Example:
    >>> spec = PathSpec.build("circle", center=(300.0, 300.0), radius=150.0)
    >>> spec.position(0.0)
    (450.0, 300.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

import torch

from rotorforge.registry import PATH_REGISTRY

Point = Tuple[float, float]
PathFunction = Callable[[float, Mapping[str, float]], Point]

CUSTOM_PATH = "custom"


def circle_path(phase: float, params: Mapping[str, float]) -> Point:
    """Point on a circle of radius ``R`` about ``(cx, cy)``.

    A non-positive radius degenerates to the centre.
    """
    radius = max(float(params["R"]), 0.0)
    return (
        params["cx"] + radius * math.cos(phase),
        params["cy"] + radius * math.sin(phase),
    )


def ellipse_path(phase: float, params: Mapping[str, float]) -> Point:
    """Point on an axis-aligned ellipse.

    ``R`` is the horizontal semi-axis and ``aspect`` (default 1.0) the ratio
    of vertical to horizontal semi-axis, so radial jitter keeps the shape.
    """
    radius_x = max(float(params["R"]), 0.0)
    radius_y = radius_x * float(params.get("aspect", 1.0))
    return (
        params["cx"] + radius_x * math.cos(phase),
        params["cy"] + radius_y * math.sin(phase),
    )


@dataclass(frozen=True)
class PathSpec:
    """Resolved path: the function plus its parameter bundle.

    Attributes:
        kind: Registered path name or ``"custom"``.
        function: The path function (registered or externally supplied).
        params: Read-only parameter mapping with ``cx``, ``cy``, ``R``.
    """

    kind: str
    function: PathFunction
    params: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        kind: str,
        center: Point,
        radius: float,
        params: Optional[Mapping[str, float]] = None,
        function: Optional[PathFunction] = None,
    ) -> "PathSpec":
        """Look up ``kind`` and freeze its parameters.

        Raises:
            KeyError: If ``kind`` is not registered.
            ValueError: If ``kind`` is ``"custom"`` and no callable is given.
        """
        if kind == CUSTOM_PATH:
            if not callable(function):
                raise ValueError("custom path requires a callable 'function'")
            fn = function
        else:
            fn = PATH_REGISTRY.get(kind)
        merged = dict(params or {})
        merged.update({"cx": float(center[0]), "cy": float(center[1]), "R": float(radius)})
        return cls(kind=kind, function=fn, params=MappingProxyType(merged))

    @property
    def center(self) -> Point:
        return (self.params["cx"], self.params["cy"])

    @property
    def radius(self) -> float:
        return self.params["R"]

    def position(self, phase: float, radius_offset: float = 0.0) -> Point:
        """Evaluate the path at ``phase`` with the radius displaced by ``radius_offset``."""
        if radius_offset:
            params = dict(self.params)
            params["R"] = params["R"] + radius_offset
        else:
            params = self.params
        x, y = self.function(phase, params)
        return (float(x), float(y))


def sample_path(
    spec: PathSpec,
    num_steps: int,
    start_phase: float = 0.0,
    end_phase: float = 2 * math.pi,
    device: torch.device | str = "cpu",
) -> torch.Tensor:
    """Evaluate a path over evenly spaced phases.

    Args:
        spec: Resolved path.
        num_steps: Number of phases to evaluate.
        start_phase: First phase in radians.
        end_phase: Last phase in radians.
        device: Device to create the trajectory on.

    Returns:
        Positions, shape [num_steps, 2]. Units: px.

    Raises:
        ValueError: If num_steps is less than 2.
    """
    if num_steps < 2:
        raise ValueError(f"num_steps must be at least 2, got {num_steps}")
    phases = torch.linspace(start_phase, end_phase, num_steps, dtype=torch.float64)
    points = [spec.position(float(p)) for p in phases]
    return torch.tensor(points, dtype=torch.float32, device=device)


__all__ = [
    "CUSTOM_PATH",
    "PathFunction",
    "PathSpec",
    "Point",
    "circle_path",
    "ellipse_path",
    "sample_path",
]
