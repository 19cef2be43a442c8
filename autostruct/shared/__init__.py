"""Shared utilities for autostruct."""

from .snapshot_loader import (
    load_snapshot,
    parse_snapshot,
)
from .naming import (
    to_pascal_case,
    to_snake_case,
    singularize,
    sanitize_module_name,
    sanitize_field_name,
    sanitize_type_name,
    RUST_KEYWORDS,
    RUST_RESERVED,
)
from .errors import (
    SchemaError,
    SchemaValidationError,
    MalformedRowError,
    DialectError,
    TypeMappingError,
    SchemaFetchError,
    OutputWriteError,
)

__all__ = [
    # Snapshot loading
    "load_snapshot",
    "parse_snapshot",
    # Naming utilities
    "to_pascal_case",
    "to_snake_case",
    "singularize",
    "sanitize_module_name",
    "sanitize_field_name",
    "sanitize_type_name",
    "RUST_KEYWORDS",
    "RUST_RESERVED",
    # Errors
    "SchemaError",
    "SchemaValidationError",
    "MalformedRowError",
    "DialectError",
    "TypeMappingError",
    "SchemaFetchError",
    "OutputWriteError",
]
