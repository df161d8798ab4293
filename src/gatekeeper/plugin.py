"""Host installation surface.

    installation = install(gate_instances={"is_authenticated": IsAuthenticated},
                           router=router)
    result = await installation.run_gates(["is_authenticated"]).run()

Programmatic checks and the navigation guard get separate GateKeeper and
registry instances so the navigation target set by the guard never leaks
into programmatic runs. Both share the same factory table.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from .gates.loader import ModuleGateLoader
from .gates.registry import GateFactory, GateLoader, GateRegistry
from .navigation import GateNavigationGuard, Router, setup_gate_router_handler
from .pipeline import GateKeeper


@dataclass
class Installation:
    """What install() hands back to the host."""

    keeper: GateKeeper
    guard: Optional[GateNavigationGuard] = None

    def run_gates(self, gates) -> GateKeeper:
        """Configure the programmatic pipeline with gates and return it."""
        return self.keeper.configure(gates)


def install(
    gate_instances: Optional[Mapping[str, GateFactory]] = None,
    router: Optional[Router] = None,
    loader: Optional[GateLoader] = None,
) -> Installation:
    """Set up gatekeeper for a host.

    Args:
        gate_instances: Gate name -> factory.
        router: Host router; when omitted no navigation hook is installed.
        loader: Fallback lookup for unregistered names (defaults to the
            built-in gate package).

    Returns:
        Installation exposing run_gates() and the installed guard, if any.
    """
    factories = dict(gate_instances or {})
    loader = loader if loader is not None else ModuleGateLoader()

    keeper = GateKeeper(registry=GateRegistry(factories, loader=loader))

    guard = None
    if router is not None:
        nav_keeper = GateKeeper(registry=GateRegistry(factories, loader=loader))
        guard = setup_gate_router_handler(nav_keeper, router)

    return Installation(keeper=keeper, guard=guard)
