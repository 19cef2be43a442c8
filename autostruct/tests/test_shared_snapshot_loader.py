import pytest

from autostruct.shared.errors import SchemaError
from autostruct.shared.snapshot_loader import load_snapshot, parse_snapshot


class TestParseSnapshot:
    def test_json_content(self):
        assert parse_snapshot('{"dialect": "postgres", "tables": []}') == {
            "dialect": "postgres",
            "tables": [],
        }

    def test_bytes_content(self):
        assert parse_snapshot(b"dialect: postgres\n") == {"dialect": "postgres"}

    def test_invalid_yaml(self):
        with pytest.raises(SchemaError, match="Invalid YAML") as exc_info:
            parse_snapshot("invalid: yaml: content: [\n", "catalog.yaml")

        assert exc_info.value.source == "catalog.yaml"

    def test_root_not_mapping(self):
        with pytest.raises(SchemaError, match="Snapshot root must be a mapping"):
            parse_snapshot("- item1\n- item2\n")

    def test_empty_document(self):
        with pytest.raises(SchemaError, match="Snapshot root must be a mapping"):
            parse_snapshot("")


class TestLoadSnapshot:
    def test_load_valid_snapshot(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("dialect: postgres\nenums:\n  - {name: mood, value: happy, sort_order: 1}\n")

        data = load_snapshot(path)
        assert data["enums"] == [{"name": "mood", "value": "happy", "sort_order": 1}]

    def test_reads_current_content(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("dialect: postgres\n")
        assert load_snapshot(path) == {"dialect": "postgres"}

        path.write_text("dialect: postgres\ntables: []\n")
        assert load_snapshot(path) == {"dialect": "postgres", "tables": []}

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(SchemaError) as exc_info:
            load_snapshot(tmp_path / "nonexistent.yaml")

        assert "Failed to read snapshot file" in str(exc_info.value)

    def test_source_is_path(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("- not a mapping\n")

        with pytest.raises(SchemaError) as exc_info:
            load_snapshot(path)

        assert exc_info.value.source == str(path)
