# domnode/cli.py
"""
@file cli.py
@brief Command line helpers for inspecting session configuration.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .actionlogger import configure_logging_from_env
from .config import available_presets
from .exceptions import ConfigError
from .options import load_options


def _cmd_presets(args: argparse.Namespace) -> int:
    presets = available_presets()
    if args.json:
        print(json.dumps(presets, indent=2, sort_keys=True))
        return 0
    for name in sorted(presets):
        overrides = presets[name]
        summary = ", ".join(
            f"{field}={value['timeout']}s/{value['interval']}s"
            for field, value in sorted(overrides.items())
        ) or "built-in defaults"
        print(f"{name:<10} {summary}")
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    try:
        options = load_options(args.path)
        effective = options.to_dict()
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    print(json.dumps(effective, indent=2, sort_keys=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="domnode",
        description="domnode - resilient element handles for UI test drivers",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    presetsp = sub.add_parser("presets", help="List timing presets")
    presetsp.add_argument("--json", action="store_true", help="Print presets as JSON")

    configp = sub.add_parser("config", help="Validate a session options YAML and print the effective config")
    configp.add_argument("path", help="Path to session options YAML")

    return p


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]
    configure_logging_from_env()
    args = build_parser().parse_args(argv)

    if args.cmd == "presets":
        return _cmd_presets(args)

    if args.cmd == "config":
        return _cmd_config(args)

    return 2


if __name__ == "__main__":
    sys.exit(main())
