"""Pipeline engine: runs an ordered gate list against one request.

Gates run strictly one at a time in list order. The first gate that
denies ends the run; later gates are never evaluated. A run with no
denial returns None.

Cached gate instances hold the options of their latest call, so two
pipelines sharing a registry must not run overlapping gates concurrently.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from .gates.registry import GateRegistry
from .gates.result import (
    EvaluationContext,
    GateReference,
    PipelineResult,
    Redirect,
)

logger = logging.getLogger(__name__)

GateDeclaration = Union[str, GateReference, Mapping]


def normalize_gates(gates) -> list[GateReference]:
    """Normalize one declaration or a sequence of them into GateReferences."""
    if gates is None:
        return []
    if isinstance(gates, (str, GateReference, Mapping)):
        gates = [gates]
    return [GateReference.from_declaration(g) for g in gates]


class GateKeeper:
    """Evaluates gates in order, short-circuiting on the first denial."""

    def __init__(
        self,
        gates: Union[GateDeclaration, Iterable[GateDeclaration]] = (),
        registry: Optional[GateRegistry] = None,
    ):
        """Initialize the pipeline.

        Args:
            gates: Gate declarations (names or {name, options} mappings).
            registry: Registry to resolve gates from. A private one is built
                when omitted.
        """
        self.registry = registry if registry is not None else GateRegistry()
        self.request_target: Any = None
        self._gates: tuple[GateReference, ...] = ()
        self.configure(gates)

    def configure(self, gates) -> "GateKeeper":
        """Replace the gate list."""
        self._gates = tuple(normalize_gates(gates))
        return self

    set_gates = configure

    @property
    def gates(self) -> tuple[GateReference, ...]:
        return self._gates

    def gate_names(self) -> list[str]:
        return [g.name for g in self._gates]

    def set_context(self, request_target: Any = None) -> "GateKeeper":
        """Set the navigation target for subsequent runs (None for ad hoc checks)."""
        self.request_target = request_target
        return self

    async def run(self) -> Optional[PipelineResult]:
        """Evaluate the gates and return the first denial, or None.

        Raises:
            UnknownGateError: If a gate name cannot be resolved.
        """
        gates = self._gates
        target = self.request_target

        for reference in gates:
            gate = self.registry.resolve(reference.name)
            context = EvaluationContext(
                request_target=target,
                gate_options=reference.options,
            )

            logger.debug("Evaluating gate %s", reference.name)
            gate.set_options(context)
            outcome = await gate.evaluate(context)

            if outcome is None:
                continue

            if isinstance(outcome, Redirect) and outcome.resume_intended:
                full_path = context.full_path
                if full_path:
                    outcome = outcome.with_resume(full_path)

            logger.info("Gate %s denied request: %r", reference.name, outcome)
            return PipelineResult(gate_name=reference.name, outcome=outcome)

        return None

    handle = run


async def check(
    gates,
    request_target: Any = None,
    registry: Optional[GateRegistry] = None,
) -> Optional[PipelineResult]:
    """Convenience coroutine for a one-off pipeline run.

    Args:
        gates: Gate declarations.
        request_target: Navigation target, or None for a programmatic check.
        registry: Registry to resolve gates from.

    Returns:
        PipelineResult for the first denial, or None if every gate passed.
    """
    keeper = GateKeeper(gates, registry=registry)
    return await keeper.set_context(request_target).run()
