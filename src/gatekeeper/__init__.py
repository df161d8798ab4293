"""gatekeeper: ordered access-control gates for navigation.

Gates run one at a time in declared order; the first denial wins and is
reported as a PipelineResult (cancel, or redirect to remediation with a
resume query back to the original destination).
"""

from .errors import UnknownGateError
from .gates import (
    CANCEL,
    BaseGate,
    EvaluationContext,
    FormRequired,
    GateDescriptor,
    GateReference,
    GateRegistry,
    ModuleGateLoader,
    PipelineResult,
    Redirect,
    Remediation,
)
from .navigation import GateNavigationGuard, NavigationTarget, setup_gate_router_handler
from .pipeline import GateKeeper, check
from .plugin import Installation, install

__version__ = "0.1.0"

__all__ = [
    "CANCEL",
    "BaseGate",
    "EvaluationContext",
    "FormRequired",
    "GateDescriptor",
    "GateKeeper",
    "GateNavigationGuard",
    "GateReference",
    "GateRegistry",
    "Installation",
    "ModuleGateLoader",
    "NavigationTarget",
    "PipelineResult",
    "Redirect",
    "Remediation",
    "UnknownGateError",
    "check",
    "install",
    "setup_gate_router_handler",
]
