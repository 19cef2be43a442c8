#!/usr/bin/env python3
"""
autostruct command line interface.

Usage:
    python -m autostruct <command> [options]

Commands:
    generate    Generate Rust modules from a database or snapshot
    types       Show the Rust type for native type names

Examples:
    python -m autostruct generate -o src/models --database-url postgres://localhost/app
    python -m autostruct generate -o src/models --snapshot catalog.yaml --singular
    python -m autostruct types int4 _text ltree --extension ltree
"""

from __future__ import annotations

import sys


def cmd_generate(args: list[str]) -> int:
    """Generate Rust modules."""
    from autostruct.codegen import main as generate_main
    try:
        generate_main.main(args)
        return 0
    except SystemExit as e:
        if isinstance(e.code, int):
            return e.code
        if e.code:
            print(e.code, file=sys.stderr)
        return 1


def cmd_types(args: list[str]) -> int:
    """Show native type mappings."""
    from autostruct.codegen import types
    try:
        types.main(args)
        return 0
    except SystemExit as e:
        if isinstance(e.code, int):
            return e.code
        if e.code:
            print(e.code, file=sys.stderr)
        return 1


COMMANDS = {
    "generate": (cmd_generate, "Generate Rust modules from a database or snapshot"),
    "types": (cmd_types, "Show the Rust type for native type names"),
}


def main() -> int:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = sys.argv[1]
    args = sys.argv[2:]

    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
