"""Tests for the pooled SQLite driver and schema helpers."""

from __future__ import annotations

import sqlite3
import threading
import time

import pytest

from link_catalog.storage.database import Database, DriverError
from link_catalog.storage.schema import SCHEMA_SQL, load_ddl


def _tables(db: Database) -> set[str]:
    rows = db.query("SELECT name FROM sqlite_master WHERE type IN ('table', 'trigger')").rows
    return {row["name"] for row in rows}


class TestQuery:
    def test_rows_and_row_count_for_select(self, db, insert):
        insert("https://a.com", "a")
        insert("https://b.com", "b")

        result = db.query("SELECT url FROM links ORDER BY id")
        assert result.row_count == 2
        assert result.rows == [{"url": "https://a.com"}, {"url": "https://b.com"}]

    def test_row_count_for_mutation(self, db, insert):
        insert("https://a.com", "a")
        insert("https://b.com", "b")

        result = db.query("UPDATE links SET title = ?", ("x",))
        assert result.rows == []
        assert result.row_count == 2

    def test_returning_rows_are_committed(self, db):
        result = db.query(
            "INSERT INTO links (url, title, language) VALUES (?, ?, ?) RETURNING id",
            ("https://a.com", "a", "en"),
        )
        assert result.row_count == 1
        assert db.query("SELECT COUNT(*) AS n FROM links").rows[0]["n"] == 1

    def test_engine_message_passed_through(self, db):
        with pytest.raises(DriverError) as exc_info:
            db.query("SELEC 1")
        assert "syntax error" in str(exc_info.value)
        assert exc_info.value.__cause__ is not None

    def test_failed_statement_is_rolled_back(self, db):
        with pytest.raises(DriverError):
            db.query(
                "INSERT INTO links (url, title, language) VALUES (?, ?, ?)",
                ("https://a.com", "a", "de"),
            )
        assert db.query("SELECT * FROM links").rows == []

    def test_stem_text_registered_on_connections(self, db):
        row = db.query("SELECT stem_text('en', 'testing the site') AS stems").rows[0]
        assert row["stems"] == "test site"


class TestPool:
    def test_connections_are_reused(self, tmp_path):
        db = Database(tmp_path / "pool.db", pool_size=2)
        with db.acquire() as first:
            pass
        with db.acquire() as second:
            pass
        assert first is second
        db.close()

    def test_pool_exhausted(self, tmp_path):
        db = Database(tmp_path / "pool.db", pool_size=1, timeout=0.05)
        with db.acquire():
            with pytest.raises(DriverError, match="connection pool exhausted"):
                with db.acquire():
                    pass
        db.close()

    def test_close_wakes_waiting_acquire(self, tmp_path):
        db = Database(tmp_path / "pool.db", pool_size=1, timeout=5.0)
        errors = []

        def wait_for_connection():
            try:
                with db.acquire():
                    pass
            except DriverError as e:
                errors.append(str(e))

        with db.acquire():
            waiter = threading.Thread(target=wait_for_connection)
            waiter.start()
            time.sleep(0.1)
            db.close()
            waiter.join(timeout=2.0)
            assert not waiter.is_alive()

        assert errors == ["connection pool is closed"]

    def test_connection_released_after_close_is_closed(self, tmp_path):
        db = Database(tmp_path / "pool.db", pool_size=1)
        with db.acquire() as conn:
            db.close()
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")

    def test_closed_pool_refuses_queries(self, tmp_path):
        db = Database(tmp_path / "pool.db")
        db.query("SELECT 1")
        db.close()
        assert db.closed
        with pytest.raises(DriverError, match="connection pool is closed"):
            db.query("SELECT 1")

    def test_context_manager_closes(self, tmp_path):
        with Database(tmp_path / "pool.db") as db:
            db.query("SELECT 1")
        assert db.closed

    def test_invalid_pool_size(self, tmp_path):
        with pytest.raises(ValueError):
            Database(tmp_path / "pool.db", pool_size=0)

    def test_creates_parent_directory(self, tmp_path):
        with Database(tmp_path / "nested" / "dir" / "links.db") as db:
            db.query("SELECT 1")
        assert (tmp_path / "nested" / "dir" / "links.db").exists()


class TestSchema:
    def test_create_schema(self, db):
        names = _tables(db)
        assert {"links", "links_fts_en", "links_fts_fr"} <= names
        assert {"links_ai", "links_au", "links_ad"} <= names

    def test_create_schema_is_idempotent(self, db):
        db.create_schema()
        assert "links" in _tables(db)

    def test_destroy_schema(self, db):
        db.destroy_schema()
        names = _tables(db)
        assert not names & {"links", "links_fts_en", "links_fts_fr", "links_ai"}

    def test_invalid_ddl(self, db):
        with pytest.raises(DriverError):
            db.create_schema("CREATE TABLEX nope;")

    def test_load_ddl_from_file(self, tmp_path):
        path = tmp_path / "schema.sql"
        path.write_text(SCHEMA_SQL, encoding="utf-8")
        assert load_ddl(path) == SCHEMA_SQL

    def test_load_ddl_from_directory(self, tmp_path):
        (tmp_path / "002_second.sql").write_text("-- second", encoding="utf-8")
        (tmp_path / "001_first.sql").write_text("-- first", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
        assert load_ddl(tmp_path) == "-- first\n-- second"

    def test_load_ddl_empty_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_ddl(tmp_path)

    def test_schema_from_loaded_ddl(self, tmp_path):
        (tmp_path / "ddl").mkdir()
        (tmp_path / "ddl" / "links.sql").write_text(SCHEMA_SQL, encoding="utf-8")
        with Database(tmp_path / "links.db") as db:
            db.create_schema(load_ddl(tmp_path / "ddl"))
            assert "links_fts_fr" in _tables(db)
