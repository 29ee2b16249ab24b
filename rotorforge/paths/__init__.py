"""Target motion paths.

Modules:
    motion: Named path functions, ``PathSpec`` and trajectory sampling.
"""

from .motion import (
    CUSTOM_PATH,
    PathSpec,
    circle_path,
    ellipse_path,
    sample_path,
)

__all__ = [
    "CUSTOM_PATH",
    "PathSpec",
    "circle_path",
    "ellipse_path",
    "sample_path",
]
