"""
Table definitions for the organizer database.

Timestamps are stored as ISO-8601 UTC text in both dialects so that
string comparison matches chronological order.
"""

from typing import List

SQLITE_SCHEMA: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        type TEXT NOT NULL CHECK(type IN ('assignment', 'project', 'exam', 'other')),
        due_date TEXT NOT NULL,
        priority INTEGER NOT NULL DEFAULT 50,
        estimated_hours REAL,
        is_completed INTEGER NOT NULL DEFAULT 0,
        completed_at TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_due ON tasks(user_id, due_date);",
    """
    CREATE TABLE IF NOT EXISTS focus_sessions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        task_id INTEGER,
        duration_minutes INTEGER NOT NULL CHECK(duration_minutes > 0),
        session_date TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE SET NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_sessions_user_date ON focus_sessions(user_id, session_date);",
]

POSTGRES_SCHEMA: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        type TEXT NOT NULL CHECK(type IN ('assignment', 'project', 'exam', 'other')),
        due_date TEXT NOT NULL,
        priority INTEGER NOT NULL DEFAULT 50,
        estimated_hours DOUBLE PRECISION,
        is_completed INTEGER NOT NULL DEFAULT 0,
        completed_at TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_due ON tasks(user_id, due_date);",
    """
    CREATE TABLE IF NOT EXISTS focus_sessions (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        task_id INTEGER REFERENCES tasks(id) ON DELETE SET NULL,
        duration_minutes INTEGER NOT NULL CHECK(duration_minutes > 0),
        session_date TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_sessions_user_date ON focus_sessions(user_id, session_date);",
]


def create_schema(conn, dialect: str = "sqlite") -> None:
    """
    Create all tables and indexes on an open DB-API connection.

    Args:
        conn: sqlite3 or psycopg2 connection
        dialect: 'sqlite' or 'postgres'
    """
    statements = POSTGRES_SCHEMA if dialect == "postgres" else SQLITE_SCHEMA
    cursor = conn.cursor()
    for statement in statements:
        cursor.execute(statement)
    conn.commit()
