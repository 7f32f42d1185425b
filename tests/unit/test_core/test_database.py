"""
Unit tests for the database module.
Tests connection management, query helpers and backend selection.
"""

import pytest
import sqlite3
from pathlib import Path
from unittest.mock import patch

from organizer.core.database import SQLiteDatabase, get_database


class TestDatabaseInit:
    """Tests for SQLiteDatabase initialization."""

    def test_init_with_valid_path(self, tmp_path):
        """Database initializes with a valid path to existing db file."""
        db_file = tmp_path / "test.db"
        conn = sqlite3.connect(db_file)
        conn.close()

        db = SQLiteDatabase(db_file)
        assert db.db_path == db_file

    def test_init_raises_if_file_not_found(self, tmp_path):
        """Database raises FileNotFoundError if db file doesn't exist."""
        db_file = tmp_path / "nonexistent.db"

        with pytest.raises(FileNotFoundError) as exc_info:
            SQLiteDatabase(db_file)

        assert "Database not found" in str(exc_info.value)
        assert "init_db.py" in str(exc_info.value)


class TestQueries:
    """Tests for the query helpers against the real schema."""

    def test_schema_tables_exist(self, temp_db):
        """create_schema creates tasks and focus_sessions."""
        assert temp_db.table_exists("tasks")
        assert temp_db.table_exists("focus_sessions")
        assert "tasks" in temp_db.get_table_names()

    def test_execute_write_returns_lastrowid_for_insert(self, temp_db, insert_task):
        """INSERT returns the new row id."""
        first = insert_task(title="One")
        second = insert_task(title="Two")
        assert second == first + 1

    def test_execute_write_returns_rowcount_for_update(self, temp_db, insert_task):
        """UPDATE returns the number of affected rows."""
        insert_task(title="One")
        insert_task(title="Two")
        affected = temp_db.execute_write("UPDATE tasks SET priority = 99")
        assert affected == 2

    def test_execute_returns_dicts(self, temp_db, insert_task):
        """execute returns plain dictionaries keyed by column."""
        insert_task(title="Essay")
        rows = temp_db.execute("SELECT title FROM tasks")
        assert rows == [{"title": "Essay"}]

    def test_execute_one_returns_none_when_missing(self, temp_db):
        """execute_one returns None for no match."""
        assert temp_db.execute_one("SELECT * FROM tasks WHERE id = ?", (42,)) is None

    def test_count_with_where_clause(self, temp_db, insert_task):
        """count applies the optional WHERE clause."""
        insert_task(user_id="a")
        insert_task(user_id="a")
        insert_task(user_id="b")
        assert temp_db.count("tasks") == 3
        assert temp_db.count("tasks", "user_id = ?", ("a",)) == 2

    def test_type_check_constraint(self, temp_db, insert_task):
        """Unknown task types are rejected by the schema."""
        with pytest.raises(sqlite3.IntegrityError):
            insert_task(task_type="chore")

    def test_deleting_task_keeps_focus_session(self, temp_db, insert_task):
        """Focus sessions outlive their task with task_id set to NULL."""
        task_id = insert_task()
        temp_db.execute_write(
            """INSERT INTO focus_sessions
               (user_id, task_id, duration_minutes, session_date, created_at, updated_at)
               VALUES ('user-1', ?, 25, '2025-03-10', 'x', 'x')""",
            (task_id,)
        )
        temp_db.execute_write("DELETE FROM tasks WHERE id = ?", (task_id,))

        row = temp_db.execute_one("SELECT task_id FROM focus_sessions")
        assert row["task_id"] is None


class TestGetDatabase:
    """Tests for backend selection."""

    def test_defaults_to_sqlite(self, temp_db, monkeypatch):
        """Without DATABASE_URL the SQLite backend is used."""
        monkeypatch.delenv("DATABASE_URL", raising=False)
        db = get_database(temp_db.db_path)
        assert isinstance(db, SQLiteDatabase)

    def test_use_sqlite_overrides_database_url(self, temp_db, monkeypatch):
        """USE_SQLITE=1 forces SQLite even when DATABASE_URL is set."""
        monkeypatch.setenv("DATABASE_URL", "postgresql://example/db")
        monkeypatch.setenv("USE_SQLITE", "1")
        db = get_database(temp_db.db_path)
        assert isinstance(db, SQLiteDatabase)

    def test_database_url_selects_postgres(self, monkeypatch):
        """DATABASE_URL selects the PostgreSQL backend."""
        monkeypatch.setenv("DATABASE_URL", "postgresql://example/db")
        monkeypatch.delenv("USE_SQLITE", raising=False)
        with patch("organizer.core.database.PostgreSQLDatabase") as pg:
            db = get_database(Path("unused.db"))
        pg.assert_called_once_with("postgresql://example/db")
        assert db is pg.return_value


def test_ping(temp_db):
    """ping succeeds against a reachable database."""
    assert temp_db.ping() is True
