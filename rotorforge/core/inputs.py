"""Pointer input source.

Mouse or gaze samples arrive asynchronously; the engine only ever reads the
latest one. There is no queue: a tick sees whatever value is current.
"""

from __future__ import annotations

from typing import Optional, Tuple

Point = Tuple[float, float]


class PointerSource:
    """Latest-value pointer position in surface coordinates (px, origin top-left).

    Args:
        initial: Position before any sample arrives, usually the surface centre.
        origin: Offset of the surface inside the page. Samples given in page
            coordinates through :meth:`push_page` are shifted by it.
    """

    def __init__(self, initial: Point, origin: Point = (0.0, 0.0)) -> None:
        self._position = (float(initial[0]), float(initial[1]))
        self.origin = (float(origin[0]), float(origin[1]))
        self.samples = 0

    def update(self, x: float, y: float) -> None:
        """Set the position in surface coordinates."""
        self._position = (float(x), float(y))
        self.samples += 1

    def push_page(self, sample: Optional[Point]) -> None:
        """Accept a page-coordinate sample; None (tracker dropout) keeps the last value."""
        if sample is None:
            return
        self.update(sample[0] - self.origin[0], sample[1] - self.origin[1])

    def latest(self) -> Point:
        return self._position
