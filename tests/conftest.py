"""
Shared fixtures for the organizer test suite.
"""

import sqlite3
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from organizer.core.database import SQLiteDatabase
from organizer.core.models import format_timestamp
from organizer.core.schema import create_schema

# Monday, mid-day UTC
NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed current time used across tests."""
    return NOW


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary SQLite database with the production schema."""
    db_file = tmp_path / "test.db"
    conn = sqlite3.connect(db_file)
    create_schema(conn, dialect="sqlite")
    conn.close()
    return SQLiteDatabase(db_file)


@pytest.fixture
def mock_config():
    """Mock config that returns the caller's default for every key."""
    config = MagicMock()
    config.get.side_effect = lambda key, section="settings", default=None: default
    return config


@pytest.fixture
def insert_task(temp_db):
    """Insert a task row directly and return its id."""

    def _insert(title="Task", due_date=NOW, task_type="assignment", user_id="user-1",
                priority=50, estimated_hours=None, is_completed=False):
        stamp = format_timestamp(NOW)
        return temp_db.execute_write(
            """
            INSERT INTO tasks (
                user_id, title, type, due_date, priority, estimated_hours,
                is_completed, completed_at, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                title,
                task_type,
                format_timestamp(due_date),
                priority,
                estimated_hours,
                1 if is_completed else 0,
                stamp if is_completed else None,
                stamp,
                stamp,
            )
        )

    return _insert
