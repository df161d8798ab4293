"""Gate capability contract.

Every gate exposes set_options() and evaluate(). Two ways to write one:

Subclass BaseGate and implement handle():

    class IsAuthenticated(BaseGate):
        form = "Login"

        async def handle(self, context):
            if not await session_is_valid(context.gate_options):
                return self.fail(context)

Or describe it and let DescribedGate supply the contract:

    is_authenticated = GateDescriptor(
        check=session_is_valid,
        remediation=Remediation.custom(lambda ctx: Redirect(name="login")),
    )
    registry.register("is_authenticated", is_authenticated.factory())

A registry keeps one instance per name, so handle() should read the
context argument rather than self.options when it may be shared.
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from ..common import confirm_path
from .result import (
    CANCEL,
    EvaluationContext,
    FormRequired,
    Outcome,
    Redirect,
    normalize_outcome,
)


class BaseGate(ABC):
    """Base class for gates.

    Attributes:
        form: Remediation form id, or False when denial cannot be remediated.
        performs_io: Whether handle() suspends on I/O (network, prompts, storage).
        options: Context of the most recent evaluation.
    """

    form: Union[str, bool] = False
    performs_io: bool = False

    def __init__(self):
        self.options = EvaluationContext()

    @property
    def gate_name(self) -> str:
        return getattr(self, "name", type(self).__name__)

    def set_options(self, context: Optional[EvaluationContext] = None) -> "BaseGate":
        self.options = context if context is not None else EvaluationContext()
        return self

    @abstractmethod
    async def handle(self, context: EvaluationContext) -> Any:
        """Run the policy check. Return None to pass or a denial (see fail())."""

    async def evaluate(self, context: Optional[EvaluationContext] = None) -> Optional[Outcome]:
        """Set options, run handle() and normalize its return value."""
        if context is not None:
            self.set_options(context)
        value = await self.handle(self.options)
        return normalize_outcome(value, self.gate_name, self.options.is_navigation)

    def fail(self, context: Optional[EvaluationContext] = None) -> Outcome:
        """Translate a denial into an outcome.

        Navigation context: the route() target. Otherwise the form id, or
        CANCEL when the gate has no form.
        """
        context = context if context is not None else self.options
        if context.is_navigation:
            return self.route(context)
        if self.form is False:
            return CANCEL
        return FormRequired(str(self.form))

    def route(self, context: Optional[EvaluationContext] = None) -> Outcome:
        """Return the remediation target for a navigation denial."""
        if self.form is False:
            return CANCEL
        return Redirect(path=confirm_path(str(self.form)))


# =============================================================================
# Descriptor gates
# =============================================================================


class RemediationKind(Enum):
    """How a described gate remediates a denial."""

    CANCEL = "cancel"
    FORM = "form"
    ROUTE = "route"


@dataclass(frozen=True)
class Remediation:
    """Tagged remediation variant for descriptor gates."""

    kind: RemediationKind
    form_id: Optional[str] = None
    route: Optional[Callable[[EvaluationContext], Any]] = None

    @classmethod
    def cancel(cls) -> "Remediation":
        return cls(RemediationKind.CANCEL)

    @classmethod
    def form(cls, form_id: str) -> "Remediation":
        if not form_id:
            raise ValueError("Remediation form id must not be empty")
        return cls(RemediationKind.FORM, form_id=form_id)

    @classmethod
    def custom(cls, route: Callable[[EvaluationContext], Any], form_id: Optional[str] = None) -> "Remediation":
        """Redirect anywhere; form_id is still reported for programmatic denials."""
        return cls(RemediationKind.ROUTE, form_id=form_id, route=route)


Check = Callable[[EvaluationContext], Union[bool, Awaitable[bool]]]


@dataclass(frozen=True)
class GateDescriptor:
    """A gate described by a check callable and a remediation."""

    check: Check
    remediation: Remediation = Remediation.cancel()
    performs_io: bool = False
    name: Optional[str] = None

    def factory(self) -> Callable[[], "DescribedGate"]:
        """Return a zero-argument factory suitable for GateRegistry.register()."""
        return lambda: DescribedGate(self)


class DescribedGate(BaseGate):
    """Adapts a GateDescriptor to the BaseGate contract."""

    def __init__(self, descriptor: GateDescriptor):
        super().__init__()
        self.descriptor = descriptor
        self.performs_io = descriptor.performs_io
        if descriptor.name:
            self.name = descriptor.name
        remediation = descriptor.remediation
        self.form = remediation.form_id if remediation.form_id else False

    async def handle(self, context: EvaluationContext) -> Any:
        allowed = self.descriptor.check(context)
        if inspect.isawaitable(allowed):
            allowed = await allowed
        if allowed:
            return None
        return self.fail(context)

    def route(self, context: Optional[EvaluationContext] = None) -> Outcome:
        remediation = self.descriptor.remediation
        if remediation.kind is RemediationKind.ROUTE:
            context = context if context is not None else self.options
            outcome = normalize_outcome(
                remediation.route(context), self.gate_name, navigation=True
            )
            # a denial must never read as a pass
            return outcome if outcome is not None else CANCEL
        return super().route(context)
