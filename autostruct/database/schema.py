"""Assembled catalog entities and the backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..mapping import TypeDescriptor
from .rows import CompositeAttributeRow, EnumValueRow, TableColumnRow


@dataclass(frozen=True, slots=True)
class Column:
    """A table column with the catalog information code generation needs."""

    name: str
    udt_name: str
    data_type: str
    is_nullable: bool
    is_unique: bool = False
    is_primary_key: bool = False
    foreign_key_table: str | None = None
    foreign_key_id: str | None = None
    table_schema: str = "public"


@dataclass(frozen=True, slots=True)
class Table:
    name: str
    columns: tuple[Column, ...] = ()


@dataclass(frozen=True, slots=True)
class EnumValue:
    name: str
    order: float


@dataclass(frozen=True, slots=True)
class Enum:
    """A user defined enumeration; ``values`` are sorted by their order."""

    name: str
    values: tuple[EnumValue, ...] = ()


@dataclass(frozen=True, slots=True)
class Attribute:
    name: str
    data_type: str


@dataclass(frozen=True, slots=True)
class CompositeType:
    """A user defined composite type; attributes keep catalog position order."""

    name: str
    attributes: tuple[Attribute, ...] = ()


@dataclass(frozen=True, slots=True)
class DatabaseSchema:
    enumerations: tuple[Enum, ...] = ()
    composite_types: tuple[CompositeType, ...] = ()
    tables: tuple[Table, ...] = ()


Row = Mapping[str, Any]


@dataclass
class CatalogRows:
    """Flat rows for one run, as returned by a backend's catalog queries."""

    tables: Sequence[TableColumnRow | Row] = field(default_factory=list)
    enums: Sequence[EnumValueRow | Row] = field(default_factory=list)
    composite_types: Sequence[CompositeAttributeRow | Row] = field(default_factory=list)
    source: str | None = None


class InfoProvider(ABC):
    """A backend able to fetch catalog rows and map its native type names."""

    dialect: str = "unknown"

    @abstractmethod
    async def fetch_rows(self) -> CatalogRows:
        """Fetch the flat catalog rows for the configured schema.

        Raises:
            SchemaFetchError: If the rows cannot be fetched.
        """

    @abstractmethod
    def map_type(self, native_type: str) -> TypeDescriptor:
        """Map a native type name to a type descriptor."""

    async def get_schema(self) -> DatabaseSchema:
        """Fetch catalog rows and assemble them into entities."""
        from .assemble import assemble_schema

        rows = await self.fetch_rows()
        return assemble_schema(
            rows.tables,
            rows.enums,
            rows.composite_types,
            source=rows.source,
        )
