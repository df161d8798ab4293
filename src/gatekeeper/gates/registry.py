"""Gate registry for resolving gate names to live instances.

Each registry owns a table of factories and a cache of instances, at most
one instance per name. There is no module-level default: hosts that want
a shared cache share one GateRegistry, hosts that want isolation build
one per request.
"""

import difflib
import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol

from ..errors import UnknownGateError
from .base import BaseGate

logger = logging.getLogger(__name__)

GateFactory = Callable[[], BaseGate]


class GateLoader(Protocol):
    """Fallback lookup used when a name has no registered factory."""

    def load(self, name: str) -> Optional[GateFactory]:
        ...


class GateRegistry:
    """Maps gate names to singleton gate instances."""

    def __init__(
        self,
        factories: Optional[Mapping[str, GateFactory]] = None,
        loader: Optional[GateLoader] = None,
    ):
        """Initialize the registry.

        Args:
            factories: Gate name -> zero-argument factory (usually the class).
            loader: Optional fallback that finds factories by name.
        """
        self._factories: dict[str, GateFactory] = dict(factories or {})
        self._instances: dict[str, BaseGate] = {}
        self.loader = loader

    def register(self, name: str, factory: GateFactory) -> None:
        """Register a gate factory.

        Raises:
            ValueError: If the name is already registered.
        """
        if name in self._factories:
            raise ValueError(f"Gate already registered: {name}")
        self._factories[name] = factory

    def gate(self, name: str) -> Callable[[Any], Any]:
        """Decorator form of register().

        Usage:
            @registry.gate("is_authenticated")
            class IsAuthenticated(BaseGate):
                ...
        """

        def decorator(factory):
            self.register(name, factory)
            return factory

        return decorator

    def resolve(self, name: str) -> BaseGate:
        """Return the cached instance for name, creating it on first use.

        Lookup order: cache, registered factories, then the loader.

        Raises:
            UnknownGateError: If no factory can be found for name.
        """
        instance = self._instances.get(name)
        if instance is not None:
            return instance

        factory = self._factories.get(name)
        if factory is None and self.loader is not None:
            factory = self.loader.load(name)
            if factory is not None:
                logger.debug("Loaded gate %s via %s", name, type(self.loader).__name__)
                self._factories[name] = factory

        if factory is None:
            raise UnknownGateError(name, self.suggest_similar(name))

        instance = factory()
        if getattr(instance, "name", None) is None:
            instance.name = name
        self._instances[name] = instance
        logger.debug("Instantiated gate %s", name)
        return instance

    def is_cached(self, name: str) -> bool:
        return name in self._instances

    def names(self) -> list[str]:
        """List registered gate names (loader-discovered names included once loaded)."""
        return list(self._factories.keys())

    def suggest_similar(self, unknown: str, limit: int = 3) -> list[str]:
        """Suggest registered names close to an unknown one."""
        return difflib.get_close_matches(unknown, self.names(), n=limit, cutoff=0.4)

    def clear(self, names: Optional[Iterable[str]] = None) -> None:
        """Drop cached instances (all of them, or only the given names)."""
        if names is None:
            self._instances.clear()
            return
        for name in names:
            self._instances.pop(name, None)
