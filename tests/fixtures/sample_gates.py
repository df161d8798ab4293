"""Gate factories referenced by CLI and config tests."""

from gatekeeper.gates.base import BaseGate
from gatekeeper.gates.result import Redirect


class AlwaysPass(BaseGate):
    async def handle(self, context):
        return None


class NeedsKittens(BaseGate):
    form = "AddKittens"

    async def handle(self, context):
        if context.gate_options.get("kittens", 0) < 1:
            return self.fail(context)


class NoForm(BaseGate):
    async def handle(self, context):
        return self.fail(context)


class GuestOnly(BaseGate):
    async def handle(self, context):
        return self.fail(context)

    def route(self, context=None):
        return Redirect(path="/home", resume_intended=False)


class Broken(BaseGate):
    async def handle(self, context):
        raise RuntimeError("backend unavailable")
