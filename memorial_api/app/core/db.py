"""
SQLite database integration and simple migration system.

This module provides the connection helpers and migrations used by
``SQLiteRecordStore``.  A spreadsheet-like layout is kept on top of
SQLite: the ``partitions`` table lists the named tabs, and every row of
every tab is a record in ``partition_rows`` holding its cells as a JSON
array.  Row numbers are 1-based per partition, with the header (when
present) stored as row 1.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: partitions and their rows
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS partitions (
            name TEXT PRIMARY KEY,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS partition_rows (
            partition TEXT NOT NULL,
            row_number INTEGER NOT NULL,
            cells TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (partition, row_number),
            FOREIGN KEY(partition) REFERENCES partitions(name)
        );
        """,
    ),
]


def resolve_database_path(database_url: str) -> str:
    """Return an absolute path for ``database_url``.

    Absolute paths are returned unchanged; relative paths are resolved
    against the working directory.
    """
    if os.path.isabs(database_url):
        return database_url
    return str(Path(database_url).resolve())


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name, and foreign keys are enforced for the lifetime of the
    connection.
    """
    conn = sqlite3.connect(db_path, timeout=10)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor; commit on success, roll back on error, always close."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: str) -> int:
    """Create the database if needed and apply pending migrations.

    Returns the schema version after migrating.  To change the schema,
    append a migration with an incremented version number; never edit
    one that has shipped.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
    return current_version
