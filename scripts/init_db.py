#!/usr/bin/env python3
"""
Database initialization script for Smart Student Organizer
Creates the tasks and focus_sessions tables in SQLite (default) or in
the PostgreSQL database named by DATABASE_URL (--postgres).
"""

import argparse
import os
import sqlite3
import sys
from pathlib import Path

# Allow running from a checkout without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from organizer.core.config import Config
from organizer.core.schema import create_schema


def init_sqlite(db_path: Path, force: bool = False) -> bool:
    """Create a fresh SQLite database at db_path"""
    db_path.parent.mkdir(parents=True, exist_ok=True)

    if db_path.exists():
        if not force:
            response = input(f"Database already exists at {db_path}. Overwrite? (yes/no): ")
            if response.lower() != 'yes':
                print("Aborting database initialization.")
                return False
        db_path.unlink()

    print(f"Creating database at {db_path}...")
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        create_schema(conn, dialect="sqlite")
        print("✓ Created tables: tasks, focus_sessions")
        return True
    except sqlite3.Error as e:
        print(f"Error creating database: {e}")
        conn.rollback()
        return False
    finally:
        conn.close()


def init_postgres(database_url: str) -> bool:
    """Create tables (if missing) in the PostgreSQL database"""
    try:
        import psycopg2
    except ImportError:
        print("Error: psycopg2 not installed. Run: pip install 'smart-student-organizer[postgres]'")
        return False

    print("Connecting to PostgreSQL...")
    conn = psycopg2.connect(database_url)
    try:
        create_schema(conn, dialect="postgres")
        print("✓ Created tables: tasks, focus_sessions")
        return True
    except psycopg2.Error as e:
        print(f"Error creating schema: {e}")
        conn.rollback()
        return False
    finally:
        conn.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Initialize the organizer database")
    parser.add_argument("--postgres", action="store_true", help="Use DATABASE_URL instead of SQLite")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing SQLite database")
    args = parser.parse_args()

    print("=" * 60)
    print("Smart Student Organizer - Database Initialization")
    print("=" * 60)
    print()

    if args.postgres:
        database_url = os.environ.get('DATABASE_URL')
        if not database_url:
            print("Error: DATABASE_URL environment variable not set")
            return 1
        success = init_postgres(database_url)
    else:
        success = init_sqlite(Config().get_database_path(), force=args.force)

    print("\n" + "=" * 60)
    print("Database initialization complete!" if success else "Database initialization failed!")
    print("=" * 60)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
