"""Gate: the user has granted camera access.

Performs I/O: awaits the host-supplied ``probe`` gate option, an async
callable that requests camera access and raises PermissionError when the
user refuses.
"""

import logging

from ..base import BaseGate
from ..result import EvaluationContext

logger = logging.getLogger(__name__)


class Gate(BaseGate):
    performs_io = True

    async def handle(self, context: EvaluationContext):
        probe = context.gate_options.get("probe")
        if probe is None:
            logger.warning("Camera is not supported on this host")
            return self.fail(context)

        try:
            await probe()
        except PermissionError:
            logger.warning("Camera permission is required to continue")
            return self.fail(context)
        return None
