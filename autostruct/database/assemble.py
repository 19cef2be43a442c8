"""Grouping of flat catalog rows into tables, enums and composite types."""

from __future__ import annotations

import logging
from typing import Iterable, TypeVar

from .rows import (
    CompositeAttributeRow,
    EnumValueRow,
    TableColumnRow,
    total_order_key,
)
from .schema import (
    Attribute,
    Column,
    CompositeType,
    DatabaseSchema,
    Enum,
    EnumValue,
    Row,
    Table,
)

logger = logging.getLogger(__name__)

_R = TypeVar("_R", TableColumnRow, EnumValueRow, CompositeAttributeRow)


def _coerce(
    rows: Iterable[_R | Row],
    row_type: type[_R],
    source: str | None,
) -> Iterable[_R]:
    """Yield typed rows, validating plain mappings as they are reached."""
    for index, row in enumerate(rows):
        if isinstance(row, row_type):
            yield row
        else:
            yield row_type.from_mapping(row, index, source)


def group_tables(
    rows: Iterable[TableColumnRow | Row],
    source: str | None = None,
) -> list[Table]:
    """Group column rows into tables.

    The first row naming a table fixes that table's position in the
    result; columns keep input order.

    Raises:
        MalformedRowError: If any row is missing a required value.
    """
    grouped: dict[str, list[Column]] = {}
    seen: set[tuple[str, str]] = set()

    for row in _coerce(rows, TableColumnRow, source):
        key = (row.table_name, row.column_name)
        if key in seen:
            logger.warning(
                "Duplicate catalog row for column '%s.%s'",
                row.table_name,
                row.column_name,
            )
        seen.add(key)
        grouped.setdefault(row.table_name, []).append(
            Column(
                name=row.column_name,
                udt_name=row.udt_name,
                data_type=row.data_type,
                is_nullable=row.is_nullable,
                is_unique=row.is_unique,
                is_primary_key=row.is_primary_key,
                foreign_key_table=row.foreign_key_table,
                foreign_key_id=row.foreign_key_id,
                table_schema=row.table_schema,
            )
        )

    return [Table(name=name, columns=tuple(columns)) for name, columns in grouped.items()]


def group_enums(
    rows: Iterable[EnumValueRow | Row],
    source: str | None = None,
) -> list[Enum]:
    """Group enum value rows into enums, values sorted by their sort order.

    The sort is stable, so equal ranks keep their input order.
    """
    grouped: dict[str, list[EnumValue]] = {}
    for row in _coerce(rows, EnumValueRow, source):
        grouped.setdefault(row.name, []).append(
            EnumValue(name=row.value, order=row.sort_order)
        )

    return [
        Enum(
            name=name,
            values=tuple(sorted(values, key=lambda v: total_order_key(v.order))),
        )
        for name, values in grouped.items()
    ]


def group_composite_types(
    rows: Iterable[CompositeAttributeRow | Row],
    source: str | None = None,
) -> list[CompositeType]:
    """Group attribute rows into composite types.

    Rows are expected in catalog position order and are not re-sorted.
    """
    grouped: dict[str, list[Attribute]] = {}
    for row in _coerce(rows, CompositeAttributeRow, source):
        grouped.setdefault(row.name, []).append(
            Attribute(name=row.attribute_name, data_type=row.data_type)
        )

    return [
        CompositeType(name=name, attributes=tuple(attributes))
        for name, attributes in grouped.items()
    ]


def assemble_schema(
    tables: Iterable[TableColumnRow | Row],
    enums: Iterable[EnumValueRow | Row] = (),
    composites: Iterable[CompositeAttributeRow | Row] = (),
    source: str | None = None,
) -> DatabaseSchema:
    """Assemble all three entity kinds into one schema."""
    schema = DatabaseSchema(
        enumerations=tuple(group_enums(enums, source)),
        composite_types=tuple(group_composite_types(composites, source)),
        tables=tuple(group_tables(tables, source)),
    )
    logger.info(
        "Assembled %d enum(s), %d composite type(s), %d table(s)",
        len(schema.enumerations),
        len(schema.composite_types),
        len(schema.tables),
    )
    return schema
