"""Command-line interface for gatekeeper."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from urllib.parse import urlsplit

from .common import PRODUCER
from .config import load_config
from .errors import (
    ConfigError,
    config_invalid,
    file_not_found,
    from_exception,
    invalid_argument,
    print_error,
)
from .gates.result import Cancel, Redirect
from .navigation import GateNavigationGuard, NavigationTarget
from .pipeline import GateKeeper


def _load_config(args: argparse.Namespace):
    """Load the --config file, printing an error envelope and returning None on failure."""
    try:
        return load_config(Path(args.config))
    except FileNotFoundError:
        print_error(file_not_found(args.config), json_mode=args.json)
    except ConfigError as e:
        print_error(from_exception(e), json_mode=args.json)
    except OSError as e:
        print_error(config_invalid(args.config, e.strerror or str(e)), json_mode=args.json)
    return None


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command.

    Exit codes: 0 navigation proceeds, 1 denied, 2 error.
    """
    if not args.target.startswith("/"):
        print_error(
            invalid_argument("target", args.target, "must be an absolute path"),
            json_mode=args.json,
        )
        return 2
    for name in args.gate or []:
        if not name.strip():
            print_error(
                invalid_argument("--gate", name, "gate name must not be empty"),
                json_mode=args.json,
            )
            return 2

    config = _load_config(args)
    if config is None:
        return 2
    try:
        registry = config.build_registry()
    except ConfigError as e:
        print_error(from_exception(e), json_mode=args.json)
        return 2

    path = urlsplit(args.target).path or "/"
    gates = args.gate if args.gate else config.gates_for(path)
    target = NavigationTarget.from_url(args.target, gates=gates)

    guard = GateNavigationGuard(GateKeeper(registry=registry))
    try:
        directive = asyncio.run(guard(target))
    except Exception as e:
        print_error(from_exception(e), json_mode=args.json)
        return 2

    result = guard.last_result
    if directive is None:
        action, location = "proceed", target.full_path
    elif isinstance(directive, str):
        action, location = "resume", directive
    elif isinstance(directive, Cancel):
        action, location = "cancel", None
    elif isinstance(directive, Redirect):
        action, location = "redirect", directive.location()
    else:
        action, location = "deny", None

    if args.json:
        print(
            json.dumps(
                {
                    "target": target.full_path,
                    "action": action,
                    "location": location,
                    "result": result.to_dict() if result else None,
                },
                indent=2,
            )
        )
    else:
        if action == "proceed":
            print(f"Proceed: {location}")
        elif action == "resume":
            print(f"Resume: {location}")
        elif action == "cancel":
            print(f"Cancelled by gate: {result.gate_name}")
        else:
            print(f"Denied by gate: {result.gate_name}")
            if location:
                print(f"  Redirect: {location}")

    return 1 if result is not None else 0


def cmd_gate_list(args: argparse.Namespace) -> int:
    """Handle the gate-list command."""
    config = _load_config(args)
    if config is None:
        return 2

    if args.json:
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    if not config.gates and not config.routes:
        print("No gates configured.")
        return 0

    print(f"{'GATE':<30} {'FACTORY':<40}")
    print("-" * 70)
    for name in sorted(config.gates):
        print(f"{name:<30} {config.gates[name]:<40}")
    if config.gate_package:
        print(f"\nFallback package: {config.gate_package}")

    if config.routes:
        print("\nRoutes:")
        for path in sorted(config.routes):
            names = ", ".join(ref.name for ref in config.gates_for(path))
            print(f"  {path}: {names or '(none)'}")

    print(f"\nTotal: {len(config.gates)} gates")
    return 0


def main(argv: list[str] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="gatekeeper",
        description="Sequential gate pipeline for navigation access control",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {PRODUCER['version']}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # check command
    check_parser = subparsers.add_parser(
        "check", help="Run the gates for a navigation target"
    )
    check_parser.add_argument("target", help="Target path, optionally with a query")
    check_parser.add_argument("--config", required=True, help="Config file")
    check_parser.add_argument(
        "--gate",
        action="append",
        help="Gate to run (repeatable); defaults to the route's configured gates",
    )
    check_parser.add_argument("--json", action="store_true", help="Output as JSON")
    check_parser.set_defaults(func=cmd_check)

    # gate list command
    gate_list_parser = subparsers.add_parser("gate-list", help="List configured gates")
    gate_list_parser.add_argument("--config", required=True, help="Config file")
    gate_list_parser.add_argument("--json", action="store_true", help="Output as JSON")
    gate_list_parser.set_defaults(func=cmd_gate_list)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
