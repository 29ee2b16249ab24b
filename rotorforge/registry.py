"""Component registry system for RotorForge extensibility.

Path shapes and simulated operators register themselves under a string
name and are then looked up by the ``kind`` field of a configuration.

Example:
    >>> from rotorforge.registry import PATH_REGISTRY
    >>> PATH_REGISTRY.register("figure_eight", figure_eight_path)
    >>> fn = PATH_REGISTRY.get("figure_eight")
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List
import warnings


class ComponentRegistry:
    """Generic name → component registry.

    Entries may be classes or plain callables; ``create`` calls the entry
    with keyword arguments, ``get`` returns it untouched.

    Attributes:
        _registry: Dict mapping component name → registered object.
    """

    def __init__(self, registry_name: str = "ComponentRegistry"):
        """Initialize empty registry.

        Args:
            registry_name: Name for error messages (e.g., "PATH_REGISTRY").
        """
        self._registry: Dict[str, Any] = {}
        self._name = registry_name

    def register(self, name: str, component: Any) -> None:
        """Register a component under ``name``.

        Registration is idempotent for the same object. Re-registering a
        name with a different object overwrites it with a warning.
        """
        if name in self._registry:
            existing = self._registry[name]
            if existing is component:
                return
            warnings.warn(
                f"{self._name}: Component '{name}' already registered with "
                f"{_describe(existing)}, overwriting with {_describe(component)}",
                UserWarning,
            )
        self._registry[name] = component

    def get(self, name: str) -> Any:
        """Return the registered component.

        Raises:
            KeyError: If name is not registered.
        """
        if name not in self._registry:
            available = ", ".join(sorted(self._registry.keys()))
            raise KeyError(
                f"{self._name}: Component '{name}' not registered. "
                f"Available: {available}"
            )
        return self._registry[name]

    def create(self, name: str, **kwargs) -> Any:
        """Instantiate (or call) the registered component with ``kwargs``."""
        factory: Callable[..., Any] = self.get(name)
        return factory(**kwargs)

    def list_registered(self) -> List[str]:
        """List all registered component names, sorted."""
        return sorted(self._registry.keys())

    def is_registered(self, name: str) -> bool:
        return name in self._registry


def _describe(component: Any) -> str:
    return getattr(component, "__name__", type(component).__name__)


PATH_REGISTRY = ComponentRegistry("PATH_REGISTRY")
OPERATOR_REGISTRY = ComponentRegistry("OPERATOR_REGISTRY")
