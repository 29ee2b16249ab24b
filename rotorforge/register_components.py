"""Registration of the built-in RotorForge components.

Called once from the package ``__init__`` so that path kinds and simulated
operators can be looked up by name from any configuration.

Example:
    >>> from rotorforge.registry import PATH_REGISTRY
    >>> PATH_REGISTRY.list_registered()
    ['circle', 'ellipse']
"""

from rotorforge.registry import OPERATOR_REGISTRY, PATH_REGISTRY
from rotorforge.paths.motion import circle_path, ellipse_path
from rotorforge.core.operators import FollowingOperator, StaticOperator


def register_all() -> None:
    """Register all built-in components with their registries."""
    PATH_REGISTRY.register("circle", circle_path)
    PATH_REGISTRY.register("ellipse", ellipse_path)

    OPERATOR_REGISTRY.register("static", StaticOperator)
    OPERATOR_REGISTRY.register("follow", FollowingOperator)
