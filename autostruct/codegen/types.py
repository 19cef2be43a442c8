"""
Show how native type names map to Rust types.

Usage:
    python -m autostruct types int4 _timestamptz ltree --extension ltree
    python -m autostruct types --list
"""

from __future__ import annotations

import argparse

from ..database import create_type_mapper
from ..mapping import Custom, TypeMapper, UnknownTypePolicy, imports_for, leaf, render
from ..shared import SchemaError


def describe(mapper: TypeMapper, name: str) -> str:
    """Return one ``name  category  rust type`` line for a native type."""
    descriptor = mapper.map(name)
    if isinstance(leaf(descriptor), Custom):
        label = "custom"
    else:
        base = name
        while mapper.array_prefix and base.startswith(mapper.array_prefix):
            base = base[len(mapper.array_prefix):]
        category = mapper.classify(base)
        label = category.value if category is not None else "custom"

    line = f"{name:24} {label:14} {render(descriptor)}"
    imports = sorted(imports_for(descriptor))
    if imports:
        line += f"  (use {', '.join(imports)})"
    return line


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Show the Rust type generated for native database types",
    )
    parser.add_argument("names", nargs="*", help="Native type names (udt names)")
    parser.add_argument(
        "--list",
        action="store_true",
        help="Describe every native type with a mapping",
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
        "--strict-types",
        action="store_true",
        help="Fail on native types without a mapping",
    )
    args = parser.parse_args(argv)
    if not args.names and not args.list:
        parser.error("give at least one type name or --list")

    policy = UnknownTypePolicy.FAIL if args.strict_types else UnknownTypePolicy.DEGRADE
    try:
        mapper = create_type_mapper(policy, [name.lower() for name in args.extensions])
        names = mapper.known_names() if args.list else args.names
        lines = [describe(mapper, name) for name in names]
    except SchemaError as e:
        raise SystemExit(f"Error: {e}") from e

    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
