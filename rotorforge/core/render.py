"""Render output interface.

The engine never draws. Each tick it hands the renderer a list of
:class:`DrawRequest` items in painter's order and never reads anything back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Sequence

TARGET_COLOR = "#fafafa"
POINTER_COLOR = "#0ff"
POINTER_RADIUS_PX = 3.0


@dataclass(frozen=True)
class DrawRequest:
    """Draw ``shape`` of ``radius`` px in ``color`` centred on ``(x, y)``.

    ``layer`` names what is being drawn (``probe``, ``target``, ``pointer``).
    """

    layer: str
    x: float
    y: float
    radius: float
    color: str
    shape: str = "circle"


class Renderer(Protocol):
    def draw(self, t_ms: float, requests: Sequence[DrawRequest]) -> None:
        ...


class NullRenderer:
    """Discards all draw requests."""

    def draw(self, t_ms: float, requests: Sequence[DrawRequest]) -> None:
        return None


class RecordingRenderer:
    """Keeps every tick's draw requests, for headless runs and tests."""

    def __init__(self) -> None:
        self.ticks: List[float] = []
        self.requests: List[List[DrawRequest]] = []

    def draw(self, t_ms: float, requests: Sequence[DrawRequest]) -> None:
        self.ticks.append(t_ms)
        self.requests.append(list(requests))

    def layer(self, name: str) -> List[DrawRequest]:
        """All requests for one layer, in tick order."""
        return [r for tick in self.requests for r in tick if r.layer == name]
