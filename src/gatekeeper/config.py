"""Gatekeeper configuration files.

A config file is JSON:

    {
      "schema_version": 1,
      "gate_package": "myapp.gates",
      "gates": {"is_authenticated": "myapp.auth:IsAuthenticated"},
      "routes": {"/buy": ["is_authenticated", {"name": "has_kittens", "options": {"min": 2}}]}
    }

gate_package enables convention-based lookup for names missing from gates.
"""

import importlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import jsonschema

from .common import SCHEMA_VERSION
from .errors import ConfigError
from .gates.loader import ModuleGateLoader
from .gates.registry import GateRegistry
from .pipeline import normalize_gates

_GATE_DECLARATION = {
    "oneOf": [
        {"type": "string", "minLength": 1},
        {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "options": {"type": "object"},
            },
            "additionalProperties": False,
        },
    ]
}

CONFIG_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "gatekeeper config",
    "type": "object",
    "required": ["schema_version"],
    "properties": {
        "schema_version": {"const": SCHEMA_VERSION},
        "gate_package": {"type": "string", "minLength": 1},
        "gates": {
            "type": "object",
            "additionalProperties": {
                "type": "string",
                "pattern": r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$",
            },
        },
        "routes": {
            "type": "object",
            "additionalProperties": {"type": "array", "items": _GATE_DECLARATION},
        },
    },
}


def import_factory(ref: str):
    """Import a factory from a 'module:attribute' string."""
    module_name, _, attr = ref.partition(":")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError:
        raise ImportError(f"{module_name} has no attribute '{attr}'") from None


@dataclass
class GatekeeperConfig:
    """Parsed gatekeeper config."""

    gates: dict[str, str] = field(default_factory=dict)
    routes: dict[str, list] = field(default_factory=dict)
    gate_package: Optional[str] = None
    source: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict, source: Optional[Path] = None) -> "GatekeeperConfig":
        """Validate and build a config.

        Raises:
            ConfigError: If data does not match CONFIG_SCHEMA.
        """
        try:
            jsonschema.validate(data, CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise ConfigError(str(source or "<dict>"), f"{location}: {e.message}") from e

        return cls(
            gates=dict(data.get("gates", {})),
            routes={path: list(decls) for path, decls in data.get("routes", {}).items()},
            gate_package=data.get("gate_package"),
            source=source,
        )

    def build_registry(self) -> GateRegistry:
        """Import configured factories into a fresh registry.

        Raises:
            ConfigError: If a factory cannot be imported.
        """
        factories = {}
        for name, ref in self.gates.items():
            try:
                factories[name] = import_factory(ref)
            except ImportError as e:
                raise ConfigError(str(self.source or "<dict>"), f"gates/{name}: {e}") from e

        loader = ModuleGateLoader(self.gate_package) if self.gate_package else None
        return GateRegistry(factories, loader=loader)

    def gates_for(self, path: str) -> list:
        """Return the gate references declared for a route path."""
        return normalize_gates(self.routes.get(path, []))

    def to_dict(self) -> dict:
        result = {"schema_version": SCHEMA_VERSION, "gates": self.gates, "routes": self.routes}
        if self.gate_package:
            result["gate_package"] = self.gate_package
        return result


def load_config(path: Path) -> GatekeeperConfig:
    """Load and validate a config file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is not UTF-8 JSON or fails validation.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except UnicodeDecodeError as e:
            raise ConfigError(str(path), f"not UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(str(path), f"invalid JSON: {e}") from e
    return GatekeeperConfig.from_dict(data, source=path)
