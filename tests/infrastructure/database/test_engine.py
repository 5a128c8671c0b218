"""Tests for database engine setup and initialization."""

from pathlib import Path

import pytest
from sqlalchemy import inspect, insert, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from schedtagctl.infrastructure.database.engine import create_db_engine, init_database
from schedtagctl.infrastructure.database.schema import dynamic_schedtags


class TestCreateDbEngine:
    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        engine.dispose()

    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
        engine.dispose()


class TestInitDatabase:
    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "schedtagctl.db"
        engine = init_database(db_path)
        assert db_path.exists()
        engine.dispose()

    def test_creates_all_tables(self, db_engine: Engine) -> None:
        tables = set(inspect(db_engine).get_table_names())
        assert {"schedtags", "dynamic_schedtags", "resources"} <= tables

    def test_rules_carry_no_resource_type(self, db_engine: Engine) -> None:
        columns = {c["name"] for c in inspect(db_engine).get_columns("dynamic_schedtags")}
        assert "schedtag_id" in columns
        assert "resource_type" not in columns

    def test_idempotent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "schedtagctl.db"
        init_database(db_path).dispose()
        init_database(db_path).dispose()

    def test_rule_requires_existing_tag(self, db_engine: Engine) -> None:
        with pytest.raises(IntegrityError), db_engine.begin() as conn:
            conn.execute(
                insert(dynamic_schedtags).values(
                    id="r1",
                    name="orphan",
                    schedtag_id="missing",
                    condition="true",
                    created="t",
                    modified="t",
                )
            )
