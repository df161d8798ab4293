"""Common constants for gatekeeper.

This module defines contract-level constants shared by the pipeline,
the navigation adapter and the config layer.
"""

# Config schema version as integer per contract
SCHEMA_VERSION = 1

# Producer info - identifies the implementation that emitted a result
PRODUCER = {
    "name": "gatekeeper",
    "version": "0.1.0",
}

# Query parameter carrying the originally intended full path
RESUME_QUERY_PARAM = "redirect"

# Default remediation path is CONFIRM_PATH_PREFIX + form id
CONFIRM_PATH_PREFIX = "/confirm/"

# Route meta key listing the gates a navigation target declares
ROUTE_GATES_META_KEY = "gates"

# Package searched when a gate name has no registered factory
DEFAULT_GATE_PACKAGE = "gatekeeper.gates.builtin"


def confirm_path(form_id: str) -> str:
    """Return the conventional remediation path for a form id."""
    return f"{CONFIRM_PATH_PREFIX}{form_id}"
