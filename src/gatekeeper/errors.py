"""Centralized error handling for gatekeeper.

This module provides:
- Exception classes raised by the registry, pipeline and config layer
- Standard error codes
- Error envelope format for CLI --json output

A gate denying a request is never an error; denials travel as
PipelineResult values. Only resolution, declaration and configuration
problems are raised.
"""

import json
import sys
from dataclasses import dataclass, field
from typing import Optional


# =============================================================================
# Exceptions
# =============================================================================


class GatekeeperException(Exception):
    """Base class for all gatekeeper exceptions."""


class UnknownGateError(GatekeeperException, LookupError):
    """Raised when a gate name cannot be resolved to an instance."""

    def __init__(self, name: str, suggestions: Optional[list[str]] = None):
        self.name = name
        self.suggestions = suggestions or []
        msg = f"Unknown gate: {name}"
        if self.suggestions:
            msg += f". Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(msg)


class GateDeclarationError(GatekeeperException, ValueError):
    """Raised when a gate list entry is neither a name nor a {name, options} mapping."""


class GateOutcomeError(GatekeeperException, TypeError):
    """Raised when a gate returns a value that is not a recognised outcome."""

    def __init__(self, gate_name: str, value):
        self.gate_name = gate_name
        self.value = value
        super().__init__(
            f"Gate '{gate_name}' returned unsupported outcome: {value!r}"
        )


class ConfigError(GatekeeperException, ValueError):
    """Raised when a gatekeeper config file is missing, malformed or invalid."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config {path}: {reason}")


# =============================================================================
# Error Codes
# =============================================================================

GATE_NOT_FOUND = "GATE_NOT_FOUND"
CONFIG_INVALID = "CONFIG_INVALID"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
FILE_NOT_FOUND = "FILE_NOT_FOUND"
COMMAND_ERROR = "COMMAND_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Error Envelope
# =============================================================================


@dataclass
class GatekeeperError:
    """Structured error for JSON output.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        hints: Actionable suggestions for resolving the error.
        details: Context-specific error details.
    """

    code: str
    message: str
    hints: list[str] = field(default_factory=list)
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to error envelope dict."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "hints": self.hints,
                "details": self.details,
            }
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def print_json(self, file=None) -> None:
        """Print error as JSON to file (default: stderr)."""
        if file is None:
            file = sys.stderr
        print(self.to_json(), file=file)

    def print_text(self, file=None) -> None:
        """Print error as human-readable text to file (default: stderr)."""
        if file is None:
            file = sys.stderr
        print(f"Error: {self.message}", file=file)
        for hint in self.hints:
            print(f"  Hint: {hint}", file=file)


# =============================================================================
# Factory Functions
# =============================================================================


def gate_not_found(name: str, suggestions: Optional[list[str]] = None) -> GatekeeperError:
    """Create error for a gate that could not be resolved."""
    hints = ["Run: gatekeeper gate-list --config <file>"]
    if suggestions:
        hints.insert(0, f"Did you mean: {', '.join(suggestions)}?")
    return GatekeeperError(
        code=GATE_NOT_FOUND,
        message=f"Gate not found: {name}",
        hints=hints,
        details={"gate": name, "suggestions": suggestions or []},
    )


def config_invalid(path: str, reason: str) -> GatekeeperError:
    """Create error for an unreadable or schema-invalid config file."""
    return GatekeeperError(
        code=CONFIG_INVALID,
        message=f"Invalid config: {path} ({reason})",
        hints=[
            "Check the file is valid JSON",
            "Ensure schema_version is 1 and gates map names to 'module:attribute'",
        ],
        details={"path": path, "reason": reason},
    )


def invalid_argument(arg_name: str, value: str, reason: str = "") -> GatekeeperError:
    """Create error for invalid argument."""
    msg = f"Invalid argument '{arg_name}': {value}"
    if reason:
        msg += f" ({reason})"
    return GatekeeperError(
        code=INVALID_ARGUMENT,
        message=msg,
        hints=["Run: gatekeeper <command> --help"],
        details={"argument": arg_name, "value": value, "reason": reason},
    )


def file_not_found(path: str) -> GatekeeperError:
    """Create error for missing file."""
    return GatekeeperError(
        code=FILE_NOT_FOUND,
        message=f"File not found: {path}",
        hints=["Check that the file path is correct"],
        details={"path": path},
    )


def command_error(message: str, details: Optional[dict] = None) -> GatekeeperError:
    """Create generic command error."""
    return GatekeeperError(
        code=COMMAND_ERROR,
        message=message,
        hints=[],
        details=details or {},
    )


def internal_error(message: str, details: Optional[dict] = None) -> GatekeeperError:
    """Create internal error."""
    return GatekeeperError(
        code=INTERNAL_ERROR,
        message=f"Internal error: {message}",
        hints=["Please report this issue"],
        details=details or {},
    )


def from_exception(exc: Exception) -> GatekeeperError:
    """Map a raised exception onto the matching error envelope."""
    if isinstance(exc, UnknownGateError):
        return gate_not_found(exc.name, exc.suggestions)
    if isinstance(exc, ConfigError):
        return config_invalid(exc.path, exc.reason)
    if isinstance(exc, GatekeeperException):
        return command_error(str(exc))
    return internal_error(str(exc), {"type": type(exc).__name__})


# =============================================================================
# Output Helper
# =============================================================================


def print_error(
    error: GatekeeperError,
    json_mode: bool = False,
    file=None,
) -> None:
    """Print error in appropriate format.

    Args:
        error: The error to print.
        json_mode: If True, print as JSON envelope. If False, print as text.
        file: Output file (default: stderr).
    """
    if json_mode:
        error.print_json(file)
    else:
        error.print_text(file)
