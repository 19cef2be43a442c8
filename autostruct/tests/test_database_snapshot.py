import json

import pytest

from autostruct.database.snapshot import SnapshotProvider
from autostruct.mapping.descriptors import Custom, Scalar
from autostruct.shared.errors import DialectError, MalformedRowError, SchemaFetchError

SNAPSHOT = """\
dialect: postgres
tables:
  - {table_name: users, column_name: id, udt_name: int4, data_type: integer,
     is_nullable: NO, is_primary_key: true}
  - {table_name: users, column_name: email, udt_name: text, data_type: text,
     is_nullable: YES}
  - {table_name: audit, column_name: id, udt_name: int8, data_type: bigint,
     is_nullable: NO, table_schema: private}
  - {table_name: _sqlx_migrations, column_name: version, udt_name: int8,
     data_type: bigint, is_nullable: NO}
enums:
  - {name: mood, value: sad, sort_order: 2}
  - {name: mood, value: happy, sort_order: 1}
composite_types:
  - {name: address, attribute_name: street, data_type: varchar}
"""


@pytest.fixture
def snapshot_path(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(SNAPSHOT)
    return path


def provider_for(path, **kwargs):
    return SnapshotProvider(path, **kwargs)


@pytest.mark.asyncio
async def test_get_schema(snapshot_path):
    schema = await provider_for(snapshot_path, exclude=["_sqlx_migrations"]).get_schema()

    assert [t.name for t in schema.tables] == ["users"]
    assert schema.tables[0].columns[1].is_nullable is True
    assert [v.name for v in schema.enumerations[0].values] == ["happy", "sad"]
    assert schema.composite_types[0].name == "address"


@pytest.mark.asyncio
async def test_schema_scope(snapshot_path):
    rows = await provider_for(snapshot_path, schema="private").fetch_rows()
    assert [row["table_name"] for row in rows.tables] == ["audit"]


@pytest.mark.asyncio
async def test_rows_without_schema_are_public(snapshot_path):
    rows = await provider_for(snapshot_path).fetch_rows()
    assert [row["table_name"] for row in rows.tables] == ["users", "users", "_sqlx_migrations"]

    schema = await provider_for(snapshot_path, schema="private").get_schema()
    assert [t.name for t in schema.tables] == ["audit"]
    assert schema.tables[0].columns[0].table_schema == "private"


@pytest.mark.asyncio
async def test_exclusion_applies_to_types(snapshot_path):
    rows = await provider_for(snapshot_path, exclude=["mood", "address"]).fetch_rows()
    assert rows.enums == []
    assert rows.composite_types == []
    assert rows.source == str(snapshot_path)


@pytest.mark.asyncio
async def test_json_snapshot(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "dialect": "postgresql",
        "tables": [{
            "table_name": "t",
            "column_name": "c",
            "udt_name": "uuid",
            "data_type": "uuid",
            "is_nullable": False,
        }],
    }))
    schema = await provider_for(path).get_schema()
    assert schema.tables[0].columns[0].udt_name == "uuid"
    assert schema.enumerations == ()


@pytest.mark.asyncio
async def test_missing_file(tmp_path):
    with pytest.raises(SchemaFetchError, match="Failed to read snapshot file"):
        await provider_for(tmp_path / "missing.yaml").fetch_rows()


@pytest.mark.asyncio
async def test_unsupported_dialect(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("dialect: mysql\ntables: []\n")
    with pytest.raises(DialectError, match="mysql"):
        await provider_for(path).fetch_rows()


@pytest.mark.asyncio
async def test_section_must_be_list(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("tables: {users: id}\n")
    with pytest.raises(SchemaFetchError, match="'tables' must be a list"):
        await provider_for(path).fetch_rows()


@pytest.mark.asyncio
async def test_null_sections_are_empty(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("tables:\nenums:\n")
    rows = await provider_for(path).fetch_rows()
    assert rows.tables == [] and rows.enums == []


@pytest.mark.asyncio
async def test_malformed_row_is_reported(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("tables:\n  - {table_name: users, column_name: id}\n")
    with pytest.raises(MalformedRowError) as exc_info:
        await provider_for(path).get_schema()
    assert exc_info.value.field == "udt_name"
    assert exc_info.value.source == str(path)


class TestMapType:
    def test_default(self, snapshot_path):
        provider = provider_for(snapshot_path)
        assert provider.map_type("int4") is Scalar.I32
        assert provider.map_type("mood") == Custom("Mood")
