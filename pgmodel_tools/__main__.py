#!/usr/bin/env python3
"""
Unified CLI for the PostgreSQL Go model generator.

Usage:
    python -m pgmodel_tools <command> [options]

Commands:
    generate    Generate Go model structs from a database or snapshot
    snapshot    Write the database schema to a YAML snapshot

Environment:
    PGHOST, PGPORT, PGDATABASE, PGUSER, PGPASSWORD, PGSSLMODE

Examples:
    python -m pgmodel_tools generate --output models/models_genpg.go
    python -m pgmodel_tools generate --snapshot schema.yaml --no-format
    python -m pgmodel_tools snapshot --schema public --schema audit
"""

from __future__ import annotations

import sys


def _exit_code(e: SystemExit) -> int:
    if e.code is None:
        return 0
    if isinstance(e.code, int):
        return e.code
    print(e.code, file=sys.stderr)
    return 1


def cmd_generate(args: list[str]) -> int:
    """Generate Go models."""
    from pgmodel_tools.db_codegen.main import main as generate_models
    try:
        generate_models(args)
        return 0
    except SystemExit as e:
        return _exit_code(e)


def cmd_snapshot(args: list[str]) -> int:
    """Write a schema snapshot."""
    from pgmodel_tools import snapshot
    try:
        snapshot.main(args)
        return 0
    except SystemExit as e:
        return _exit_code(e)


COMMANDS = {
    "generate": (cmd_generate, "Generate Go model structs from a database or snapshot"),
    "snapshot": (cmd_snapshot, "Write the database schema to a YAML snapshot"),
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
