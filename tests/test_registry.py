"""Tests for the gate registry and convention-based loader."""

import asyncio
from pathlib import Path

import pytest

from gatekeeper.errors import UnknownGateError
from gatekeeper.gates.base import BaseGate
from gatekeeper.gates.loader import ModuleGateLoader
from gatekeeper.gates.registry import GateRegistry
from gatekeeper.gates.result import CANCEL, EvaluationContext, FormRequired

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class Counted(BaseGate):
    constructed = 0

    def __init__(self):
        super().__init__()
        type(self).constructed += 1

    async def handle(self, context):
        return None


@pytest.fixture(autouse=True)
def reset_counter():
    Counted.constructed = 0


@pytest.fixture
def fixture_path(monkeypatch):
    """Make tests/fixtures importable."""
    monkeypatch.syspath_prepend(str(FIXTURES_DIR))


class TestGateRegistry:
    """Tests for GateRegistry."""

    def test_resolve_caches_instance(self):
        """Resolving twice returns the same instance and constructs once."""
        registry = GateRegistry({"counted": Counted})
        first = registry.resolve("counted")
        second = registry.resolve("counted")

        assert first is second
        assert Counted.constructed == 1
        assert registry.is_cached("counted")

    def test_resolve_names_instance(self):
        registry = GateRegistry({"counted": Counted})
        assert registry.resolve("counted").gate_name == "counted"

    def test_separate_registries_are_isolated(self):
        """Two registries never share instances."""
        factories = {"counted": Counted}
        a = GateRegistry(factories)
        b = GateRegistry(factories)
        assert a.resolve("counted") is not b.resolve("counted")
        assert Counted.constructed == 2

    def test_register_duplicate(self):
        registry = GateRegistry({"counted": Counted})
        with pytest.raises(ValueError, match="already registered"):
            registry.register("counted", Counted)

    def test_decorator(self):
        registry = GateRegistry()

        @registry.gate("decorated")
        class Decorated(BaseGate):
            async def handle(self, context):
                return None

        assert isinstance(registry.resolve("decorated"), Decorated)
        assert "decorated" in registry.names()

    def test_unknown_gate(self):
        registry = GateRegistry({"is_authenticated": Counted})
        with pytest.raises(UnknownGateError) as exc_info:
            registry.resolve("is_authenticatd")

        assert exc_info.value.name == "is_authenticatd"
        assert "is_authenticated" in exc_info.value.suggestions
        assert not registry.is_cached("is_authenticatd")

    def test_clear(self):
        registry = GateRegistry({"counted": Counted})
        first = registry.resolve("counted")
        registry.clear(["counted"])
        assert registry.resolve("counted") is not first

        registry.clear()
        assert not registry.is_cached("counted")

    def test_registered_factory_wins_over_loader(self, fixture_path):
        registry = GateRegistry({"has_kittens": Counted}, loader=ModuleGateLoader("kitten_gates"))
        assert isinstance(registry.resolve("has_kittens"), Counted)


class TestModuleGateLoader:
    """Tests for convention-based gate loading."""

    def test_load_by_name(self, fixture_path):
        """A name resolves to <package>.<name>.Gate."""
        registry = GateRegistry(loader=ModuleGateLoader("kitten_gates"))
        from kitten_gates import has_kittens

        before = len(has_kittens.CONSTRUCTED)
        gate = registry.resolve("has_kittens")
        again = registry.resolve("has_kittens")

        assert gate is again
        assert isinstance(gate, has_kittens.Gate)
        assert len(has_kittens.CONSTRUCTED) == before + 1
        assert "has_kittens" in registry.names()

        outcome = asyncio.run(gate.evaluate(EvaluationContext()))
        assert outcome == FormRequired("AddKittens")

    def test_missing_module_is_unknown(self, fixture_path):
        registry = GateRegistry(loader=ModuleGateLoader("kitten_gates"))
        with pytest.raises(UnknownGateError):
            registry.resolve("has_puppies")

    def test_missing_package_is_unknown(self):
        registry = GateRegistry(loader=ModuleGateLoader("no_such_gate_package"))
        with pytest.raises(UnknownGateError):
            registry.resolve("anything")

    def test_non_identifier_is_unknown(self):
        assert ModuleGateLoader().load("../etc") is None

    def test_module_without_gate(self, fixture_path):
        with pytest.raises(AttributeError, match="does not define"):
            ModuleGateLoader("kitten_gates").load("no_factory")

    def test_broken_gate_module_propagates(self, fixture_path):
        """Import errors inside a gate module are not treated as unknown."""
        with pytest.raises(ModuleNotFoundError):
            ModuleGateLoader("kitten_gates").load("broken_import")

    def test_default_package_builtin(self):
        from gatekeeper.gates.builtin.has_given_camera_permission import Gate

        assert ModuleGateLoader().load("has_given_camera_permission") is Gate


class TestCameraPermissionGate:
    """Tests for the built-in camera permission gate."""

    def resolve(self):
        return GateRegistry(loader=ModuleGateLoader()).resolve("has_given_camera_permission")

    def test_performs_io(self):
        assert self.resolve().performs_io is True

    def test_granted(self):
        calls = []

        async def probe():
            calls.append(True)

        gate = self.resolve()
        ctx = EvaluationContext(gate_options={"probe": probe})
        assert asyncio.run(gate.evaluate(ctx)) is None
        assert calls == [True]

    def test_refused(self):
        async def probe():
            raise PermissionError("denied")

        gate = self.resolve()
        ctx = EvaluationContext(request_target="/scan", gate_options={"probe": probe})
        assert asyncio.run(gate.evaluate(ctx)) is CANCEL

    def test_unsupported(self):
        """No probe means the host has no camera: deny."""
        gate = self.resolve()
        assert asyncio.run(gate.evaluate(EvaluationContext())) is CANCEL

    def test_other_errors_propagate(self):
        async def probe():
            raise OSError("device busy")

        gate = self.resolve()
        with pytest.raises(OSError):
            asyncio.run(gate.evaluate(EvaluationContext(gate_options={"probe": probe})))
