"""PostgreSQL backend: catalog queries over asyncpg and the type category table."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final, Iterable, Sequence

import asyncpg

from ..mapping import (
    Array,
    Category,
    CategoryTable,
    Range,
    Scalar,
    TypeDescriptor,
    TypeMapper,
    UnknownTypePolicy,
)
from ..shared import SchemaFetchError
from .schema import CatalogRows, InfoProvider

logger = logging.getLogger(__name__)

DIALECT: Final[str] = "postgres"
DEFAULT_SCHEMA: Final[str] = "public"

# Keyed by udt_name as reported by information_schema / pg_type.typname.
# Geometric and text search types have no dedicated descriptor and are
# carried as strings.
POSTGRES_TYPES: Final[CategoryTable] = {
    Category.NUMERIC: {
        "bool": Scalar.BOOL,
        "char": Scalar.I8,
        "int2": Scalar.I16,
        "int4": Scalar.I32,
        "int8": Scalar.I64,
        "float4": Scalar.F32,
        "float8": Scalar.F64,
        "numeric": Scalar.DECIMAL,
        "oid": Scalar.U32,
    },
    Category.TEMPORAL: {
        "date": Scalar.DATE,
        "time": Scalar.TIME,
        "timetz": Scalar.TIME,
        "timestamp": Scalar.TIMESTAMP,
        "timestamptz": Scalar.TIMESTAMP_TZ,
        "interval": Scalar.INTERVAL,
    },
    Category.STRING: {
        "text": Scalar.STRING,
        "varchar": Scalar.STRING,
        "bpchar": Scalar.STRING,
        "name": Scalar.STRING,
        "unknown": Scalar.STRING,
    },
    Category.BINARY: {
        "bytea": Scalar.BYTES,
    },
    Category.BIT_STRING: {
        "bit": Scalar.BIT,
        "varbit": Scalar.BIT,
    },
    Category.NETWORK: {
        "inet": Scalar.IP_NETWORK,
        "cidr": Scalar.IP_NETWORK,
        "macaddr": Scalar.MAC_ADDRESS,
        "macaddr8": Scalar.MAC_ADDRESS,
    },
    Category.JSON: {
        "json": Scalar.JSON,
        "jsonb": Scalar.JSON,
        "jsonpath": Scalar.STRING,
    },
    Category.GEOMETRIC: {
        "point": Scalar.STRING,
        "line": Scalar.STRING,
        "lseg": Scalar.STRING,
        "box": Scalar.STRING,
        "path": Scalar.STRING,
        "polygon": Scalar.STRING,
        "circle": Scalar.STRING,
    },
    Category.TEXT_SEARCH: {
        "tsvector": Scalar.STRING,
        "tsquery": Scalar.STRING,
    },
    Category.RANGE: {
        "int4range": Range(Scalar.I32),
        "int8range": Range(Scalar.I64),
        "numrange": Range(Scalar.DECIMAL),
        "tsrange": Range(Scalar.TIMESTAMP),
        "tstzrange": Range(Scalar.TIMESTAMP_TZ),
        "daterange": Range(Scalar.DATE),
        "int4multirange": Array(Range(Scalar.I32)),
        "int8multirange": Array(Range(Scalar.I64)),
        "nummultirange": Array(Range(Scalar.DECIMAL)),
        "tsmultirange": Array(Range(Scalar.TIMESTAMP)),
        "tstzmultirange": Array(Range(Scalar.TIMESTAMP_TZ)),
        "datemultirange": Array(Range(Scalar.DATE)),
    },
    Category.SPECIALIZED: {
        "uuid": Scalar.UUID,
        "xml": Scalar.STRING,
        "money": Scalar.MONEY,
        "void": Scalar.UNIT,
    },
    # Only mapped when the extension is enabled for the run.
    Category.EXTENSION: {
        "ltree": Scalar.TREE_PATH,
        "citext": Scalar.STRING,
    },
}

COLUMNS_QUERY: Final[str] = """
    SELECT
        c.table_name,
        c.column_name,
        c.udt_name,
        c.data_type,
        c.is_nullable = 'YES' AS is_nullable,
        COALESCE(bool_or(tc.constraint_type = 'UNIQUE'), false) AS is_unique,
        COALESCE(bool_or(tc.constraint_type = 'PRIMARY KEY'), false) AS is_primary_key,
        max(kcu2.table_name) AS foreign_key_table,
        max(kcu2.column_name) AS foreign_key_id,
        c.table_schema
    FROM
        information_schema.columns c
        JOIN information_schema.tables t
            ON t.table_name = c.table_name
            AND t.table_schema = c.table_schema
            AND t.table_type = 'BASE TABLE'
        LEFT JOIN information_schema.key_column_usage kcu
            ON c.table_name = kcu.table_name
            AND c.column_name = kcu.column_name
            AND c.table_schema = kcu.table_schema
        LEFT JOIN information_schema.table_constraints tc
            ON kcu.constraint_name = tc.constraint_name
            AND kcu.table_schema = tc.table_schema
        LEFT JOIN information_schema.referential_constraints rc
            ON kcu.constraint_name = rc.constraint_name
            AND kcu.constraint_schema = rc.constraint_schema
        LEFT JOIN information_schema.key_column_usage kcu2
            ON rc.unique_constraint_name = kcu2.constraint_name
            AND kcu2.ordinal_position = kcu.position_in_unique_constraint
            AND kcu2.table_schema = rc.unique_constraint_schema
    WHERE
        c.table_schema = $1
        AND c.table_name <> ALL($2::text[])
    GROUP BY
        c.table_schema, c.table_name, c.column_name, c.udt_name,
        c.data_type, c.is_nullable, c.ordinal_position
    ORDER BY
        c.table_name,
        c.ordinal_position
"""

ENUMS_QUERY: Final[str] = """
    SELECT
        t.typname AS name,
        e.enumlabel AS value,
        e.enumsortorder AS sort_order
    FROM pg_type t
        JOIN pg_enum e ON e.enumtypid = t.oid
        JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE n.nspname = $1
        AND t.typname <> ALL($2::text[])
    ORDER BY t.typname, e.enumsortorder
"""

COMPOSITES_QUERY: Final[str] = """
    SELECT
        t.typname AS name,
        a.attname AS attribute_name,
        at.typname AS data_type
    FROM pg_type t
        JOIN pg_class c ON c.oid = t.typrelid AND c.relkind = 'c'
        JOIN pg_namespace n ON n.oid = t.typnamespace
        JOIN pg_attribute a ON a.attrelid = c.oid AND a.attnum > 0 AND NOT a.attisdropped
        JOIN pg_type at ON at.oid = a.atttypid
    WHERE n.nspname = $1
        AND t.typtype = 'c'
        AND t.typname <> ALL($2::text[])
    ORDER BY t.typname, a.attnum
"""


def create_type_mapper(
    policy: UnknownTypePolicy = UnknownTypePolicy.DEGRADE,
    extensions: Iterable[str] = (),
) -> TypeMapper:
    """Create a mapper over :data:`POSTGRES_TYPES`.

    Array columns are reported with a leading underscore (``_int4``).
    """
    return TypeMapper(
        POSTGRES_TYPES,
        dialect=DIALECT,
        array_prefix="_",
        policy=policy,
        extensions=extensions,
    )


class PostgresProvider(InfoProvider):
    """Fetches catalog rows from a PostgreSQL database.

    Args:
        dsn: Connection string.
        schema: Catalog schema whose entities are generated.
        exclude: Table, enum and composite type names to leave out.
        timeout: Connection timeout in seconds.
        policy: Behaviour for unclassified native types.
        extensions: Extension types to map (e.g. ``ltree``).
    """

    dialect = DIALECT

    def __init__(
        self,
        dsn: str,
        schema: str = DEFAULT_SCHEMA,
        exclude: Sequence[str] = (),
        timeout: float = 3.0,
        policy: UnknownTypePolicy = UnknownTypePolicy.DEGRADE,
        extensions: Iterable[str] = (),
    ) -> None:
        self.dsn = dsn
        self.schema = schema
        self.exclude = list(exclude)
        self.timeout = timeout
        self.mapper = create_type_mapper(policy, extensions)

    def map_type(self, native_type: str) -> TypeDescriptor:
        return self.mapper.map(native_type)

    async def _connect(self) -> Any:
        try:
            return await asyncpg.connect(self.dsn, timeout=self.timeout)
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError) as e:
            raise SchemaFetchError(
                f"failed to connect to postgresql database: {e}", DIALECT
            ) from e

    async def fetch_rows(self) -> CatalogRows:
        conn = await self._connect()
        try:
            tables = await conn.fetch(COLUMNS_QUERY, self.schema, self.exclude)
            enums = await conn.fetch(ENUMS_QUERY, self.schema, self.exclude)
            composites = await conn.fetch(COMPOSITES_QUERY, self.schema, self.exclude)
        except (OSError, asyncpg.PostgresError) as e:
            raise SchemaFetchError(
                f"failed to query catalog of schema '{self.schema}': {e}", DIALECT
            ) from e
        finally:
            await conn.close()

        logger.info(
            "Fetched %d column row(s), %d enum value row(s), %d attribute row(s) "
            "from schema '%s'",
            len(tables),
            len(enums),
            len(composites),
            self.schema,
        )
        return CatalogRows(
            tables=[dict(row) for row in tables],
            enums=[dict(row) for row in enums],
            composite_types=[dict(row) for row in composites],
            source=DIALECT,
        )
