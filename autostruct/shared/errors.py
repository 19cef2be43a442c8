"""Custom exceptions for schema introspection and code generation."""

from __future__ import annotations


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        full_message = f"{message}" if not source else f"[{source}] {message}"
        super().__init__(full_message)


class SchemaValidationError(SchemaError):
    """Raised when catalog data or generated entities fail validation."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, source)


class MalformedRowError(SchemaValidationError):
    """Raised when a flat catalog row is missing a value or carries a bad one."""

    def __init__(
        self,
        message: str,
        row_kind: str,
        index: int | None = None,
        field: str | None = None,
        source: str | None = None,
    ) -> None:
        self.row_kind = row_kind
        self.index = index
        where = f"{row_kind} row" if index is None else f"{row_kind} row #{index}"
        super().__init__(f"{where}: {message}", source, field)


class DialectError(SchemaError):
    """Raised for dialect-specific issues."""

    def __init__(
        self,
        message: str,
        dialect: str,
        source: str | None = None,
    ) -> None:
        self.dialect = dialect
        super().__init__(f"Dialect '{dialect}': {message}", source)


class TypeMappingError(SchemaError):
    """Raised when a native type has no mapping and strict mapping is enabled."""

    def __init__(
        self,
        type_name: str,
        context: str,
        source: str | None = None,
    ) -> None:
        self.type_name = type_name
        super().__init__(f"No type mapping for '{type_name}' ({context})", source)


class SchemaFetchError(SchemaError):
    """Raised when catalog rows cannot be fetched from their source."""


class OutputWriteError(SchemaError):
    """Raised when a generated file cannot be written."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message, path)
