#!/usr/bin/env python3
"""
Generate Rust structs and enums from a live database or a catalog snapshot.

Pipeline per run:
- Fetch catalog rows from the backend
- Assemble tables, enums and composite types
- Generate, annotate and finalize one snippet per entity
- Write one module per snippet plus a mod.rs index

Usage:
    python -m autostruct generate -o src/models --database-url postgres://...
    python -m autostruct generate -o src/models --snapshot catalog.yaml --framework sqlx
"""

from __future__ import annotations

import argparse
import asyncio
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final, Mapping, Sequence

from dotenv import load_dotenv

from ..database import DatabaseSchema, InfoProvider, create_provider
from ..logging_config import LOG_LEVELS, configure_logging
from ..mapping import UnknownTypePolicy
from ..shared import SchemaError
from .generator import EntityKind, Options, Snippet, generate_snippets
from .writer import write_snippets

DEFAULT_TIMEOUT: Final[float] = 3.0

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS: Final[Mapping[str, float]] = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


class Framework(Enum):
    """Target framework, selecting the derive hints added to each item."""

    NONE = "none"
    SQLX = "sqlx"

    def derive_hints(self) -> dict[EntityKind, list[str]]:
        struct_derives = ["Debug", "Clone"]
        enum_derives = ["Debug", "Clone", "PartialEq", "Eq"]
        if self is Framework.SQLX:
            struct_derives.append("sqlx::FromRow")
            enum_derives.append("sqlx::Type")

        struct_hint = f"#[derive({', '.join(struct_derives)})]"
        enum_hint = f"#[derive({', '.join(enum_derives)})]"
        return {
            EntityKind.ENUM: [enum_hint],
            EntityKind.COMPOSITE: [struct_hint],
            EntityKind.TABLE: [struct_hint],
        }


@dataclass
class Arguments:
    """Settings for one generation run."""

    output: Path
    database_url: str | None = None
    snapshot: Path | None = None
    schema: str = "public"
    singular: bool = False
    exclude: list[str] = field(default_factory=list)
    framework: Framework = Framework.NONE
    timeout: float = DEFAULT_TIMEOUT
    strict_types: bool = False
    extensions: list[str] = field(default_factory=list)
    parallel: bool = True
    workers: int | None = None

    @property
    def policy(self) -> UnknownTypePolicy:
        return UnknownTypePolicy.FAIL if self.strict_types else UnknownTypePolicy.DEGRADE

    @property
    def options(self) -> Options:
        return Options(
            singular_names=self.singular,
            parallel=self.parallel,
            max_workers=self.workers,
        )


def parse_duration(value: str) -> float:
    """Parse a duration such as ``3s``, ``500ms``, ``1m30s`` or ``2.5`` into seconds.

    Raises:
        ValueError: If the value is not a duration.
    """
    text = value.strip().lower()
    if not text:
        raise ValueError("empty duration")
    try:
        seconds = float(text)
    except ValueError:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()
        if pos != len(text):
            raise ValueError(f"invalid duration: {value!r}") from None
    if seconds < 0:
        raise ValueError(f"invalid duration: {value!r}")
    return seconds


def _duration_arg(value: str) -> float:
    try:
        return parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_snippets(
    schema: DatabaseSchema,
    provider: InfoProvider,
    arguments: Arguments,
) -> list[Snippet]:
    """Generate finalized snippets for an assembled schema."""
    return generate_snippets(
        schema,
        provider.map_type,
        arguments.options,
        annotations=arguments.framework.derive_hints(),
    )


async def run(arguments: Arguments) -> list[Path]:
    """Run the full pipeline and return the written snippet files.

    Raises:
        SchemaError: On any fetch, mapping, generation or write failure.
    """
    provider = create_provider(
        database_url=arguments.database_url,
        snapshot=arguments.snapshot,
        schema=arguments.schema,
        exclude=arguments.exclude,
        timeout=arguments.timeout,
        policy=arguments.policy,
        extensions=arguments.extensions,
    )
    schema = await provider.get_schema()
    snippets = build_snippets(schema, provider, arguments)
    return write_snippets(snippets, arguments.output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate Rust structs and enums from a database catalog",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Directory to write the generated modules to",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--database-url",
        default=None,
        help="Connection string (default: $DATABASE_URL)",
    )
    source.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Catalog snapshot file (YAML or JSON) to read instead of a database",
    )
    parser.add_argument(
        "--schema",
        default="public",
        help="Catalog schema to generate (default: public)",
    )
    parser.add_argument(
        "--singular",
        action="store_true",
        help="Name items after the singular form of their catalog names",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        metavar="NAME",
        help="Table, enum or composite type to skip (repeatable)",
    )
    parser.add_argument(
        "--framework",
        type=Framework,
        choices=list(Framework),
        default=Framework.NONE,
        metavar="{none,sqlx}",
        help="Framework to add derive hints for",
    )
    parser.add_argument(
        "--timeout",
        type=_duration_arg,
        default=DEFAULT_TIMEOUT,
        help="Connection timeout, e.g. 3s or 500ms (default: 3s)",
    )
    parser.add_argument(
        "--strict-types",
        action="store_true",
        help="Fail on native types without a mapping instead of emitting a custom type",
    )
    parser.add_argument(
        "--extension",
        dest="extensions",
        action="append",
        default=[],
        metavar="TYPE",
        help="Map an extension type such as ltree or citext (repeatable)",
    )
    parser.add_argument(
        "--no-parallel",
        action="store_true",
        help="Disable parallel processing",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum number of parallel workers",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    return parser


def parse_arguments(argv: Sequence[str] | None = None) -> tuple[Arguments, argparse.Namespace]:
    load_dotenv()
    args = build_parser().parse_args(argv)
    database_url = args.database_url
    if database_url is None and args.snapshot is None:
        database_url = os.environ.get("DATABASE_URL")

    arguments = Arguments(
        output=args.output,
        database_url=database_url,
        snapshot=args.snapshot,
        schema=args.schema,
        singular=args.singular,
        exclude=args.exclude,
        framework=args.framework,
        timeout=args.timeout,
        strict_types=args.strict_types,
        extensions=[name.lower() for name in args.extensions],
        parallel=not args.no_parallel,
        workers=args.workers,
    )
    return arguments, args


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    arguments, args = parse_arguments(argv)
    configure_logging(args.log_level, json_logs=args.json_logs)

    try:
        written = asyncio.run(run(arguments))
    except SchemaError as e:
        raise SystemExit(f"Error: {e}") from e

    source = arguments.snapshot or "database"
    print(
        f"Generated {len(written)} file(s) from {source} "
        f"into {arguments.output.resolve()}"
    )


if __name__ == "__main__":
    main()
