"""
Catalog access for the supported database systems.

Every backend implements :class:`InfoProvider`: it fetches flat catalog
rows and maps its native type names to type descriptors. PostgreSQL is
served live (asyncpg) or from a snapshot file; MySQL, MSSQL and SQLite
are recognised but not yet supported.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

from ..mapping import UnknownTypePolicy
from ..shared import DialectError
from .assemble import assemble_schema, group_composite_types, group_enums, group_tables
from .postgres import POSTGRES_TYPES, PostgresProvider, create_type_mapper
from .rows import CompositeAttributeRow, EnumValueRow, TableColumnRow
from .schema import (
    Attribute,
    CatalogRows,
    Column,
    CompositeType,
    DatabaseSchema,
    Enum as DatabaseEnum,
    EnumValue,
    InfoProvider,
    Table,
)
from .snapshot import SnapshotProvider


class Kind(Enum):
    """The kinds of databases autostruct knows about."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    MSSQL = "mssql"
    SQLITE = "sqlite"

    @classmethod
    def from_url(cls, url: str) -> Kind:
        """Infer the database kind from a connection string."""
        scheme, sep, _ = url.partition("://")
        if not sep:
            scheme = url.partition(":")[0]
        kinds = {
            "postgres": cls.POSTGRES,
            "postgresql": cls.POSTGRES,
            "mysql": cls.MYSQL,
            "mariadb": cls.MYSQL,
            "mssql": cls.MSSQL,
            "sqlserver": cls.MSSQL,
            "sqlite": cls.SQLITE,
        }
        try:
            return kinds[scheme.lower()]
        except KeyError:
            raise DialectError(
                "failed to infer database kind from provided connection string",
                scheme or "unknown",
            ) from None


def create_provider(
    *,
    database_url: str | None = None,
    snapshot: Path | None = None,
    schema: str = "public",
    exclude: Sequence[str] = (),
    timeout: float = 3.0,
    policy: UnknownTypePolicy = UnknownTypePolicy.DEGRADE,
    extensions: Iterable[str] = (),
) -> InfoProvider:
    """Create the backend for a run.

    A snapshot file takes precedence over a connection string.

    Raises:
        DialectError: If neither source is given or the database kind is unsupported.
    """
    if snapshot is not None:
        return SnapshotProvider(
            snapshot,
            schema=schema,
            exclude=exclude,
            policy=policy,
            extensions=extensions,
        )
    if not database_url:
        raise DialectError(
            "no database url provided - please set it via command line arguments "
            "or with the DATABASE_URL environment variable",
            "unknown",
        )

    kind = Kind.from_url(database_url)
    if kind is not Kind.POSTGRES:
        raise DialectError("database is not yet supported", kind.value)
    return PostgresProvider(
        database_url,
        schema=schema,
        exclude=exclude,
        timeout=timeout,
        policy=policy,
        extensions=extensions,
    )


__all__ = [
    # Backends
    "InfoProvider",
    "Kind",
    "PostgresProvider",
    "SnapshotProvider",
    "create_provider",
    "create_type_mapper",
    "POSTGRES_TYPES",
    # Rows
    "CatalogRows",
    "TableColumnRow",
    "EnumValueRow",
    "CompositeAttributeRow",
    # Entities
    "Attribute",
    "Column",
    "CompositeType",
    "DatabaseEnum",
    "DatabaseSchema",
    "EnumValue",
    "Table",
    # Assembly
    "assemble_schema",
    "group_composite_types",
    "group_enums",
    "group_tables",
]
