"""
Storage backends for tasks and focus sessions.

Two interchangeable backends share one query API written with SQLite-style
``?`` placeholders:

- SQLiteDatabase: a local file, used by the CLI and local development
- PostgreSQLDatabase: the hosted deployment, selected by DATABASE_URL

Every call opens its own connection and closes it before returning, so a
backend instance is safe to share across requests.

Usage:
    db = get_database(config.get_database_path())
    rows = db.execute("SELECT * FROM tasks WHERE user_id = ?", (user_id,))
"""

import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

try:
    import psycopg2
    import psycopg2.extras
    POSTGRES_AVAILABLE = True
except ImportError:
    POSTGRES_AVAILABLE = False

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _is_insert(query: str) -> bool:
    return query.lstrip().upper().startswith("INSERT")


class DatabaseBase(ABC):
    """
    Query helpers shared by both backends.

    Subclasses supply a connection, a dict-producing cursor and, where the
    driver needs it, a placeholder rewrite.
    """

    #: Query returning one row with a ``name`` column per user table
    TABLE_NAMES_QUERY = ""

    @abstractmethod
    def get_connection(self):
        """Context manager yielding an open DB-API connection."""

    @abstractmethod
    def _cursor(self, conn):
        """Cursor whose rows can be turned into dicts."""

    def prepare(self, query: str) -> str:
        """Adapt a ``?``-style query to the driver's paramstyle."""
        return query

    def _inserted_id(self, cursor) -> int:
        return cursor.lastrowid

    @contextmanager
    def _run(self, query: str, params: Tuple, commit: bool = False) -> Iterator[Any]:
        with self.get_connection() as conn:
            cursor = self._cursor(conn)
            try:
                cursor.execute(self.prepare(query), params)
                yield cursor
                if commit:
                    conn.commit()
            finally:
                cursor.close()

    def execute(self, query: str, params: Tuple = ()) -> List[Row]:
        """Run a SELECT and return every row as a dict."""
        with self._run(query, params) as cursor:
            return [dict(row) for row in cursor.fetchall()]

    def execute_one(self, query: str, params: Tuple = ()) -> Optional[Row]:
        """Run a SELECT and return the first row, or None."""
        with self._run(query, params) as cursor:
            row = cursor.fetchone()
            return dict(row) if row else None

    def execute_write(self, query: str, params: Tuple = ()) -> int:
        """
        Run an INSERT, UPDATE or DELETE.

        Returns:
            The new row id for INSERT, the affected row count otherwise
        """
        with self._run(query, params, commit=True) as cursor:
            if _is_insert(query):
                return self._inserted_id(cursor)
            return cursor.rowcount

    def row_to_dict(self, row: Any) -> Optional[Row]:
        if row is None:
            return None
        return row if isinstance(row, dict) else dict(row)

    def rows_to_dicts(self, rows: List[Any]) -> List[Row]:
        return [self.row_to_dict(row) for row in rows if row is not None]

    def count(self, table_name: str, where_clause: str = "", params: Tuple = ()) -> int:
        query = f"SELECT COUNT(*) AS count FROM {table_name}"
        if where_clause:
            query += f" WHERE {where_clause}"
        result = self.execute_one(query, params)
        return result["count"] if result else 0

    def get_table_names(self) -> List[str]:
        return [row["name"] for row in self.execute(self.TABLE_NAMES_QUERY)]

    def table_exists(self, table_name: str) -> bool:
        return table_name in self.get_table_names()

    def ping(self) -> bool:
        """Round-trip a trivial query; raises if the database is unreachable."""
        return self.execute_one("SELECT 1 AS ok") is not None


class SQLiteDatabase(DatabaseBase):
    """Single-file SQLite backend with foreign keys enforced."""

    TABLE_NAMES_QUERY = (
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    )

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        if not self.db_path.exists():
            raise FileNotFoundError(
                f"Database not found at {self.db_path}. "
                "Run 'python scripts/init_db.py' to create it."
            )

    @contextmanager
    def get_connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        # ON DELETE SET NULL on focus_sessions.task_id depends on this
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def _cursor(self, conn):
        return conn.cursor()


class PostgreSQLDatabase(DatabaseBase):
    """Hosted PostgreSQL backend reached through DATABASE_URL."""

    TABLE_NAMES_QUERY = (
        "SELECT table_name AS name FROM information_schema.tables "
        "WHERE table_schema = 'public' ORDER BY table_name"
    )

    def __init__(self, database_url: str):
        if not POSTGRES_AVAILABLE:
            raise ImportError(
                "psycopg2 not installed. Run: pip install 'smart-student-organizer[postgres]'"
            )
        self.database_url = database_url
        self.db_path = database_url

    @contextmanager
    def get_connection(self):
        conn = psycopg2.connect(self.database_url)
        try:
            yield conn
        finally:
            conn.close()

    def _cursor(self, conn):
        return conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)

    def prepare(self, query: str) -> str:
        query = query.replace("?", "%s")
        if _is_insert(query) and "RETURNING" not in query.upper():
            query = query.rstrip().rstrip(";") + " RETURNING id"
        return query

    def _inserted_id(self, cursor) -> int:
        row = cursor.fetchone()
        return row["id"] if row else 0


Database = Union[SQLiteDatabase, PostgreSQLDatabase]


def get_database(db_path: Path) -> Database:
    """
    Open the configured backend.

    PostgreSQL is used when DATABASE_URL is set, unless USE_SQLITE is
    truthy; otherwise the SQLite file at db_path.
    """
    use_sqlite = os.environ.get("USE_SQLITE", "").lower() in ("1", "true", "yes")
    database_url = os.environ.get("DATABASE_URL")

    if database_url and not use_sqlite:
        logger.info("Using PostgreSQL database")
        return PostgreSQLDatabase(database_url)

    logger.info(f"Using SQLite database at {db_path}")
    return SQLiteDatabase(db_path)
