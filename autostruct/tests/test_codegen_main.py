from pathlib import Path
from unittest.mock import patch

import pytest

from autostruct.codegen.generator import EntityKind
from autostruct.codegen.main import (
    Arguments,
    Framework,
    main,
    parse_arguments,
    parse_duration,
)
from autostruct.mapping.mapper import UnknownTypePolicy

SNAPSHOT = """\
dialect: postgres
tables:
  - {table_name: users, column_name: id, udt_name: int4, data_type: integer, is_nullable: false}
  - {table_name: posts, column_name: id, udt_name: uuid, data_type: uuid, is_nullable: false}
  - {table_name: posts, column_name: user_id, udt_name: int4, data_type: integer,
     is_nullable: true, foreign_key_table: users, foreign_key_id: id}
  - {table_name: posts, column_name: path, udt_name: ltree, data_type: USER-DEFINED,
     is_nullable: true}
enums:
  - {name: mood, value: happy, sort_order: 1}
"""


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("autostruct.codegen.main.configure_logging"):
        yield


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(SNAPSHOT)
    return path


class TestParseDuration:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("3s", 3.0),
            ("500ms", 0.5),
            ("1m", 60.0),
            ("1m30s", 90.0),
            ("2.5", 2.5),
            ("1h", 3600.0),
            (" 10S ", 10.0),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["", "soon", "3 s", "5d", "-1", "3s!"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestFramework:
    def test_none(self):
        hints = Framework.NONE.derive_hints()
        assert hints[EntityKind.TABLE] == ["#[derive(Debug, Clone)]"]
        assert hints[EntityKind.COMPOSITE] == ["#[derive(Debug, Clone)]"]
        assert hints[EntityKind.ENUM] == ["#[derive(Debug, Clone, PartialEq, Eq)]"]

    def test_sqlx(self):
        hints = Framework.SQLX.derive_hints()
        assert hints[EntityKind.TABLE] == ["#[derive(Debug, Clone, sqlx::FromRow)]"]
        assert hints[EntityKind.ENUM] == ["#[derive(Debug, Clone, PartialEq, Eq, sqlx::Type)]"]


class TestParseArguments:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        arguments, _ = parse_arguments(["-o", "out"])

        assert arguments == Arguments(output=Path("out"))
        assert arguments.policy is UnknownTypePolicy.DEGRADE
        assert arguments.options.parallel is True

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://env/app")
        arguments, _ = parse_arguments(["-o", "out"])
        assert arguments.database_url == "postgres://env/app"

    def test_snapshot_ignores_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://env/app")
        arguments, _ = parse_arguments(["-o", "out", "--snapshot", "catalog.yaml"])
        assert arguments.database_url is None
        assert arguments.snapshot == Path("catalog.yaml")

    def test_all_options(self):
        arguments, args = parse_arguments(
            [
                "-o", "out",
                "--database-url", "postgres://localhost/app",
                "--schema", "app",
                "--singular",
                "-e", "migrations",
                "--exclude", "audit",
                "--framework", "sqlx",
                "--timeout", "500ms",
                "--strict-types",
                "--extension", "LTREE",
                "--no-parallel",
                "--workers", "4",
                "--json-logs",
            ]
        )
        assert arguments.schema == "app"
        assert arguments.singular is True
        assert arguments.exclude == ["migrations", "audit"]
        assert arguments.framework is Framework.SQLX
        assert arguments.timeout == 0.5
        assert arguments.policy is UnknownTypePolicy.FAIL
        assert arguments.extensions == ["ltree"]
        assert arguments.options.parallel is False
        assert arguments.options.max_workers == 4
        assert args.json_logs is True

    def test_bad_timeout(self, capsys):
        with pytest.raises(SystemExit):
            parse_arguments(["-o", "out", "--timeout", "soon"])
        assert "invalid duration" in capsys.readouterr().err

    def test_output_required(self):
        with pytest.raises(SystemExit):
            parse_arguments([])

    def test_log_level_is_case_insensitive(self):
        _, args = parse_arguments(["-o", "out", "--log-level", "debug"])
        assert args.log_level == "DEBUG"

    def test_unknown_log_level(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["-o", "out", "--log-level", "verbose"])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err


class TestMain:
    def test_generates_from_snapshot(self, tmp_path, snapshot, capsys):
        out = tmp_path / "models"
        main(["-o", str(out), "--snapshot", str(snapshot), "--framework", "sqlx", "--singular"])

        assert sorted(p.name for p in out.iterdir()) == ["mod.rs", "mood.rs", "post.rs", "user.rs"]
        post = (out / "post.rs").read_text()
        assert "use uuid::Uuid;\nuse super::Ltree;\nuse super::User;\n\n" in post
        assert "#[derive(Debug, Clone, sqlx::FromRow)]\npub struct Post {\n" in post
        assert "    pub user_id: Option<i32>,\n" in post
        assert "#[derive(Debug, Clone, PartialEq, Eq, sqlx::Type)]\npub enum Mood {" in (
            out / "mood.rs"
        ).read_text()

        summary = capsys.readouterr().out
        assert summary.startswith("Generated 3 file(s) from ")
        assert str(out.resolve()) in summary

    def test_extension_type(self, tmp_path, snapshot):
        out = tmp_path / "models"
        main(["-o", str(out), "--snapshot", str(snapshot), "--extension", "ltree"])

        posts = (out / "posts.rs").read_text()
        assert "use sqlx::postgres::types::PgLTree;\n" in posts
        assert "    pub path: Option<PgLTree>,\n" in posts

    def test_strict_types_fail(self, tmp_path, snapshot):
        with pytest.raises(SystemExit) as exc_info:
            main(["-o", str(tmp_path / "m"), "--snapshot", str(snapshot), "--strict-types"])
        assert str(exc_info.value.code).startswith("Error: ")
        assert "ltree" in str(exc_info.value.code)

    def test_missing_database_url(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            main(["-o", str(tmp_path)])
        assert "no database url provided" in str(exc_info.value.code)

    def test_unsupported_database(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["-o", str(tmp_path), "--database-url", "mysql://localhost/app"])
        assert "database is not yet supported" in str(exc_info.value.code)
