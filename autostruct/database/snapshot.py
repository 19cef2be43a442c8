"""Catalog snapshot backend.

A snapshot is a YAML or JSON file holding the same flat rows a live
catalog query returns, so generation can run without a database::

    dialect: postgres
    tables:
      - {table_name: users, column_name: id, udt_name: int4,
         data_type: integer, is_nullable: false, is_primary_key: true}
    enums:
      - {name: mood, value: happy, sort_order: 1}
    composite_types:
      - {name: address, attribute_name: street, data_type: varchar}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from ..mapping import TypeDescriptor, UnknownTypePolicy
from ..shared import DialectError, SchemaFetchError, SchemaError, load_snapshot
from .postgres import DEFAULT_SCHEMA, DIALECT as POSTGRES, create_type_mapper
from .schema import CatalogRows, InfoProvider

logger = logging.getLogger(__name__)

_SECTIONS = ("tables", "enums", "composite_types")


class SnapshotProvider(InfoProvider):
    """Serves catalog rows from a snapshot file.

    Args:
        path: Snapshot file.
        schema: Only column rows of this catalog schema are kept.
        exclude: Table, enum and composite type names to leave out.
        policy: Behaviour for unclassified native types.
        extensions: Extension types to map.
    """

    dialect = POSTGRES

    def __init__(
        self,
        path: Path,
        schema: str = DEFAULT_SCHEMA,
        exclude: Sequence[str] = (),
        policy: UnknownTypePolicy = UnknownTypePolicy.DEGRADE,
        extensions: Iterable[str] = (),
    ) -> None:
        self.path = path
        self.schema = schema
        self.exclude = frozenset(exclude)
        self.mapper = create_type_mapper(policy, extensions)

    def _load(self) -> dict[str, Any]:
        try:
            data = load_snapshot(self.path)
        except SchemaError as e:
            raise SchemaFetchError(str(e)) from e

        dialect = str(data.get("dialect", POSTGRES)).lower()
        if dialect not in (POSTGRES, "postgresql"):
            raise DialectError("snapshot dialect is not yet supported", dialect, str(self.path))

        for section in _SECTIONS:
            if not isinstance(data.get(section) or [], list):
                raise SchemaFetchError(f"'{section}' must be a list", str(self.path))
        return data

    def map_type(self, native_type: str) -> TypeDescriptor:
        return self.mapper.map(native_type)

    def _keep_column(self, row: Any) -> bool:
        if not isinstance(row, dict):
            # Left for row validation to report.
            return True
        if row.get("table_name") in self.exclude:
            return False
        # Rows without a schema belong to the default one, as in row assembly.
        return (row.get("table_schema") or DEFAULT_SCHEMA) == self.schema

    def _keep_type(self, row: Any) -> bool:
        return not isinstance(row, dict) or row.get("name") not in self.exclude

    async def fetch_rows(self) -> CatalogRows:
        data = self._load()
        tables = [row for row in data.get("tables") or [] if self._keep_column(row)]
        enums = [row for row in data.get("enums") or [] if self._keep_type(row)]
        composites = [row for row in data.get("composite_types") or [] if self._keep_type(row)]

        logger.info(
            "Read %d column row(s), %d enum value row(s), %d attribute row(s) from %s",
            len(tables),
            len(enums),
            len(composites),
            self.path,
        )
        return CatalogRows(
            tables=tables,
            enums=enums,
            composite_types=composites,
            source=str(self.path),
        )
