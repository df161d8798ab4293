"""Gate data model: references, evaluation context, outcomes and results.

Outcomes form a small discriminated union:

    None            the gate passed
    CANCEL          stop the request, no remediation possible
    Redirect(...)   divert to a remediation target, optionally resuming later
    FormRequired    programmatic denial naming the remediation form

Gates may return the raw values used by hand-written gates (False, a form
id string, a route mapping); normalize_outcome() turns them into the
union above.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlencode

from ..common import RESUME_QUERY_PARAM
from ..errors import GateDeclarationError, GateOutcomeError


@dataclass(frozen=True)
class GateReference:
    """A gate name plus the options passed to it on each evaluation."""

    name: str
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_declaration(cls, declaration) -> "GateReference":
        """Normalize a bare name, a {name, options} mapping or a GateReference.

        Raises:
            GateDeclarationError: If the declaration has no usable name.
        """
        if isinstance(declaration, GateReference):
            return declaration
        if isinstance(declaration, str):
            if not declaration:
                raise GateDeclarationError("Gate name must not be empty")
            return cls(name=declaration)
        if isinstance(declaration, Mapping):
            name = declaration.get("name")
            if not isinstance(name, str) or not name:
                raise GateDeclarationError(
                    f"Gate declaration is missing a name: {declaration!r}"
                )
            options = declaration.get("options") or {}
            if not isinstance(options, Mapping):
                raise GateDeclarationError(
                    f"Options for gate '{name}' must be a mapping"
                )
            return cls(name=name, options=dict(options))
        raise GateDeclarationError(f"Unsupported gate declaration: {declaration!r}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"name": self.name, "options": dict(self.options)}


@dataclass(frozen=True)
class EvaluationContext:
    """Per-call input handed to a gate.

    A non-None request_target marks the evaluation as part of a navigation,
    which turns denials into redirects instead of form ids.
    """

    request_target: Any = None
    gate_options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_navigation(self) -> bool:
        return self.request_target is not None

    @property
    def full_path(self) -> Optional[str]:
        """Resolve the full path of the request target, if it has one."""
        return resolve_full_path(self.request_target)


def resolve_full_path(target) -> Optional[str]:
    """Return a target's full path from a string, attribute or mapping key."""
    if target is None:
        return None
    if isinstance(target, str):
        return target or None
    if isinstance(target, Mapping):
        value = target.get("fullPath") or target.get("full_path")
    else:
        value = getattr(target, "full_path", None)
    return value or None


# =============================================================================
# Outcomes
# =============================================================================


class Cancel:
    """Denial with no remediation: the request must stop."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CANCEL"

    def __bool__(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {"kind": "cancel"}


CANCEL = Cancel()


@dataclass
class Redirect:
    """Denial that diverts the request to a remediation target.

    Attributes:
        path: Target path (e.g., /confirm/AddKittens).
        name: Named route, for hosts that route by name.
        params: Route parameters for named routes.
        query: Query parameters; the resume path lands here.
        resume_intended: False opts out of the resume query.
    """

    path: Optional[str] = None
    name: Optional[str] = None
    params: dict = field(default_factory=dict)
    query: dict = field(default_factory=dict)
    resume_intended: bool = True

    @classmethod
    def from_dict(cls, data: Mapping) -> "Redirect":
        """Create from a route mapping as returned by hand-written gates."""
        resume = True
        for key in ("resume_intended", "setRedirectToIntended", "set_redirect_to_intended"):
            if key in data:
                resume = data[key] is not False
                break
        return cls(
            path=data.get("path"),
            name=data.get("name"),
            params=dict(data.get("params") or {}),
            query=dict(data.get("query") or {}),
            resume_intended=resume,
        )

    def with_resume(self, full_path: str) -> "Redirect":
        """Return a copy whose query carries the resume path."""
        return replace(self, query={RESUME_QUERY_PARAM: full_path})

    @property
    def resume_path(self) -> Optional[str]:
        return self.query.get(RESUME_QUERY_PARAM)

    def location(self) -> str:
        """Render as path?query. Named routes without a path render their name."""
        base = self.path or self.name or ""
        if not self.query:
            return base
        return f"{base}?{urlencode(self.query, safe='/')}"

    def to_dict(self) -> dict:
        result = {"kind": "redirect", "location": self.location()}
        if self.path:
            result["path"] = self.path
        if self.name:
            result["name"] = self.name
        if self.params:
            result["params"] = dict(self.params)
        if self.query:
            result["query"] = dict(self.query)
        result["resume_intended"] = self.resume_intended
        return result


@dataclass(frozen=True)
class FormRequired:
    """Programmatic denial naming the form that would remediate it."""

    form_id: str

    def to_dict(self) -> dict:
        return {"kind": "form", "form_id": self.form_id}


Outcome = Union[Cancel, Redirect, FormRequired]


def normalize_outcome(
    value, gate_name: str = "<gate>", navigation: bool = False
) -> Optional[Outcome]:
    """Turn a gate's raw return value into an outcome (None means pass).

    A string is a path to redirect to during a navigation, and a form id
    otherwise.

    Raises:
        GateOutcomeError: If the value has no outcome meaning.
    """
    if value is None:
        return None
    if isinstance(value, (Cancel, Redirect, FormRequired)):
        return value
    if value is False:
        return CANCEL
    if isinstance(value, str):
        if navigation:
            return Redirect(path=value)
        return FormRequired(value)
    if isinstance(value, Mapping):
        return Redirect.from_dict(value)
    raise GateOutcomeError(gate_name, value)


# =============================================================================
# Pipeline result
# =============================================================================


@dataclass
class PipelineResult:
    """The first denial produced by a pipeline run."""

    gate_name: str
    outcome: Outcome

    @property
    def cancelled(self) -> bool:
        return self.outcome is CANCEL

    @property
    def redirect(self) -> Optional[Redirect]:
        return self.outcome if isinstance(self.outcome, Redirect) else None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"gate": self.gate_name, "outcome": self.outcome.to_dict()}

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
