"""Flat catalog rows, one per column, enum value or composite attribute.

These model the rows returned by a backend's catalog queries before they
are grouped into entities.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from ..shared import MalformedRowError

_MISSING = object()
_TRUE_STRINGS = frozenset({"yes", "true", "t", "y", "1"})
_FALSE_STRINGS = frozenset({"no", "false", "f", "n", "0"})


class _RowReader:
    """Pulls typed values out of one mapping, reporting the row on failure."""

    __slots__ = ("mapping", "kind", "index", "source")

    def __init__(
        self,
        mapping: Mapping[str, Any],
        kind: str,
        index: int | None,
        source: str | None,
    ) -> None:
        if not isinstance(mapping, Mapping):
            raise MalformedRowError(
                f"expected a mapping, got {type(mapping).__name__}",
                kind,
                index,
                source=source,
            )
        self.mapping = mapping
        self.kind = kind
        self.index = index
        self.source = source

    def _fail(self, message: str, field: str) -> MalformedRowError:
        return MalformedRowError(message, self.kind, self.index, field, self.source)

    def _get(self, field: str, default: Any = _MISSING) -> Any:
        value = self.mapping.get(field, _MISSING)
        if value is _MISSING or value is None:
            if default is _MISSING:
                raise self._fail("missing required value", field)
            return default
        return value

    def text(self, field: str) -> str:
        value = self._get(field)
        if not isinstance(value, str) or not value:
            raise self._fail(f"expected a non-empty string, got {value!r}", field)
        return value

    def optional_text(self, field: str) -> str | None:
        value = self._get(field, None)
        if value is None:
            return None
        if not isinstance(value, str):
            raise self._fail(f"expected a string, got {value!r}", field)
        return value or None

    def flag(self, field: str, default: Any = _MISSING) -> bool:
        value = self._get(field, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise self._fail(f"expected a boolean, got {value!r}", field)

    def rank(self, field: str) -> float:
        value = self._get(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._fail(f"expected a number, got {value!r}", field)
        return float(value)


@dataclass(frozen=True, slots=True)
class TableColumnRow:
    table_name: str
    column_name: str
    udt_name: str
    data_type: str
    is_nullable: bool
    is_unique: bool = False
    is_primary_key: bool = False
    foreign_key_table: str | None = None
    foreign_key_id: str | None = None
    table_schema: str = "public"

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        index: int | None = None,
        source: str | None = None,
    ) -> TableColumnRow:
        """Build a row from a catalog record or snapshot entry.

        Raises:
            MalformedRowError: If a required value is missing or mistyped.
        """
        read = _RowReader(mapping, "column", index, source)
        return cls(
            table_name=read.text("table_name"),
            column_name=read.text("column_name"),
            udt_name=read.text("udt_name"),
            data_type=read.text("data_type"),
            is_nullable=read.flag("is_nullable"),
            is_unique=read.flag("is_unique", False),
            is_primary_key=read.flag("is_primary_key", False),
            foreign_key_table=read.optional_text("foreign_key_table"),
            foreign_key_id=read.optional_text("foreign_key_id"),
            table_schema=read.optional_text("table_schema") or "public",
        )


@dataclass(frozen=True, slots=True)
class EnumValueRow:
    name: str
    value: str
    sort_order: float

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        index: int | None = None,
        source: str | None = None,
    ) -> EnumValueRow:
        read = _RowReader(mapping, "enum value", index, source)
        return cls(
            name=read.text("name"),
            value=read.text("value"),
            sort_order=read.rank("sort_order"),
        )


@dataclass(frozen=True, slots=True)
class CompositeAttributeRow:
    name: str
    attribute_name: str
    data_type: str

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        index: int | None = None,
        source: str | None = None,
    ) -> CompositeAttributeRow:
        read = _RowReader(mapping, "composite attribute", index, source)
        return cls(
            name=read.text("name"),
            attribute_name=read.text("attribute_name"),
            data_type=read.text("data_type"),
        )


def total_order_key(value: float) -> tuple[int, float, float]:
    """Sort key giving floats an IEEE 754 total order.

    Negative NaN sorts before everything and positive NaN after, and
    ``-0.0`` sorts before ``0.0``.
    """
    if math.isnan(value):
        return (-1 if math.copysign(1.0, value) < 0 else 1, 0.0, 0.0)
    return (0, value, math.copysign(1.0, value))
