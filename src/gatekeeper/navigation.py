"""Navigation adapter: runs a pipeline before each navigation.

The guard returns a navigation directive understood by the host router:

    None            proceed unchanged
    CANCEL          abort the navigation
    Redirect        navigate to the remediation target instead
    str             navigate to this full path (resume after remediation)

Resume convention: a denied navigation is redirected with
``?redirect=<original full path>``. The next navigation that carries that
parameter, and was not itself produced by a redirect, goes straight to the
original path without running gates again.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Protocol, Union
from urllib.parse import parse_qsl, urlencode, urlsplit

from .common import RESUME_QUERY_PARAM, ROUTE_GATES_META_KEY
from .gates.result import Cancel, Outcome, Redirect
from .pipeline import GateKeeper

logger = logging.getLogger(__name__)

Directive = Union[None, Outcome, str]


@dataclass
class NavigationTarget:
    """A resolved navigation target."""

    path: str
    query: dict = field(default_factory=dict)
    name: Optional[str] = None
    meta: dict = field(default_factory=dict)
    redirected_from: Optional["NavigationTarget"] = None

    @classmethod
    def from_url(
        cls,
        url: str,
        gates: Optional[list] = None,
        name: Optional[str] = None,
        redirected_from: Optional["NavigationTarget"] = None,
    ) -> "NavigationTarget":
        """Build a target from a path with an optional query string."""
        parts = urlsplit(url)
        meta = {ROUTE_GATES_META_KEY: list(gates)} if gates else {}
        return cls(
            path=parts.path or "/",
            query=dict(parse_qsl(parts.query)),
            name=name,
            meta=meta,
            redirected_from=redirected_from,
        )

    @property
    def full_path(self) -> str:
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(self.query, safe='/')}"

    @property
    def gates(self) -> list:
        return list(self.meta.get(ROUTE_GATES_META_KEY) or [])

    @property
    def resume_target(self) -> Optional[str]:
        """The path to resume to, when this navigation should skip gates."""
        if self.redirected_from is not None:
            return None
        return self.query.get(RESUME_QUERY_PARAM) or None


NavigationHook = Callable[[NavigationTarget], Awaitable[Directive]]


class Router(Protocol):
    """The one capability the adapter needs from a host router."""

    def before_each(self, hook: NavigationHook) -> Any:
        ...


class GateNavigationGuard:
    """Before-navigation hook backed by a GateKeeper."""

    def __init__(self, keeper: GateKeeper):
        self.keeper = keeper
        self.last_result = None

    async def __call__(self, to: NavigationTarget) -> Directive:
        resume = to.resume_target
        if resume:
            logger.debug("Resuming navigation to %s", resume)
            self.last_result = None
            return resume

        self.keeper.configure(to.gates)
        self.keeper.set_context(to)

        result = await self.keeper.run()
        self.last_result = result
        if result is None:
            return None
        return result.outcome


def setup_gate_router_handler(keeper: GateKeeper, router: Router) -> GateNavigationGuard:
    """Register a gate guard on the router and return it."""
    guard = GateNavigationGuard(keeper)
    router.before_each(guard)
    return guard


def directive_location(directive: Directive) -> Optional[str]:
    """Render a guard directive as the URL to navigate to.

    Returns None both for "proceed" and "abort"; check the directive
    itself to tell them apart.
    """
    if directive is None or isinstance(directive, Cancel) or directive is False:
        return None
    if isinstance(directive, str):
        return directive
    if isinstance(directive, Redirect):
        return directive.location()
    # FormRequired only arises outside navigation
    return None
