"""Convention-based gate loading.

A gate named ``foo`` lives in module ``<package>.foo`` and exposes its
factory as the module attribute ``Gate``.
"""

import importlib
import logging
from typing import Optional

from ..common import DEFAULT_GATE_PACKAGE

logger = logging.getLogger(__name__)

GATE_ATTRIBUTE = "Gate"


class ModuleGateLoader:
    """Finds gate factories by importing modules named after the gate."""

    def __init__(self, package: str = DEFAULT_GATE_PACKAGE):
        self.package = package

    def module_name(self, name: str) -> str:
        return f"{self.package}.{name}"

    def load(self, name: str):
        """Import <package>.<name> and return its Gate factory.

        Returns:
            The factory, or None if no such module exists.

        Raises:
            AttributeError: If the module exists but defines no Gate.
        """
        if not name.isidentifier():
            return None

        module_name = self.module_name(name)
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only a missing gate module means "unknown"; a gate module that
            # fails its own imports is a real error.
            if e.name in (module_name, self.package) or module_name.startswith(f"{e.name}."):
                logger.debug("No gate module %s", module_name)
                return None
            raise

        factory: Optional[object] = getattr(module, GATE_ATTRIBUTE, None)
        if factory is None:
            raise AttributeError(
                f"Gate module {module_name} does not define '{GATE_ATTRIBUTE}'"
            )
        return factory
