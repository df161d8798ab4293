"""Gate contract, data model and registry.

A gate is a named policy check. The registry turns names into cached
instances; the pipeline (gatekeeper.pipeline) runs them in order.
"""

from .base import BaseGate, DescribedGate, GateDescriptor, Remediation, RemediationKind
from .loader import ModuleGateLoader
from .registry import GateRegistry
from .result import (
    CANCEL,
    Cancel,
    EvaluationContext,
    FormRequired,
    GateReference,
    PipelineResult,
    Redirect,
    normalize_outcome,
)

__all__ = [
    "BaseGate",
    "DescribedGate",
    "GateDescriptor",
    "Remediation",
    "RemediationKind",
    "ModuleGateLoader",
    "GateRegistry",
    "CANCEL",
    "Cancel",
    "EvaluationContext",
    "FormRequired",
    "GateReference",
    "PipelineResult",
    "Redirect",
    "normalize_outcome",
]
