"""
SQLite-backed record store.

Partitions and rows live in the tables created by ``core.db``.  Each
call opens its own short-lived connection, so the store can be shared
by request threads without extra locking.  Appends compute the next
row number and insert in a single statement, which keeps row numbers
gap-free even if two processes write at once.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from ..core.db import get_cursor, init_db, resolve_database_path
from ..core.exceptions import StoreError
from .base import Cell, RecordStore, Row

IN_MEMORY_NAMES = {":memory:", ""}


class SQLiteRecordStore(RecordStore):
    """Record store keeping spreadsheet-like partitions in a SQLite file."""

    def __init__(self, database_url: str) -> None:
        # Every call opens its own connection, and an in-memory database
        # does not outlive the connection that created it.
        if database_url.strip() in IN_MEMORY_NAMES or database_url.startswith("file::memory:"):
            raise StoreError("DATABASE_URL must name a file; in-memory databases are not supported")
        self.db_path = resolve_database_path(database_url)

    def initialize(self) -> None:
        logger = logging.getLogger(__name__)
        version = init_db(self.db_path)
        logger.info("Record store ready at %s (schema version %s)", self.db_path, version)

    def list_partitions(self) -> List[str]:
        with self._cursor() as cursor:
            rows = cursor.execute("SELECT name FROM partitions ORDER BY created_at, name").fetchall()
        return [row["name"] for row in rows]

    def find_partition(self, name: str, case_insensitive: bool = False) -> Optional[str]:
        if not case_insensitive:
            with self._cursor() as cursor:
                row = cursor.execute("SELECT name FROM partitions WHERE name = ?", (name,)).fetchone()
            return row["name"] if row else None
        wanted = name.casefold()
        for existing in self.list_partitions():
            if existing.casefold() == wanted:
                return existing
        return None

    def create_partition(self, name: str, header: Optional[Sequence[Cell]] = None) -> None:
        with self._cursor() as cursor:
            if cursor.execute("SELECT 1 FROM partitions WHERE name = ?", (name,)).fetchone():
                raise StoreError(f"Partition {name} already exists")
            cursor.execute("INSERT INTO partitions (name) VALUES (?)", (name,))
            if header:
                cursor.execute(
                    "INSERT INTO partition_rows (partition, row_number, cells) VALUES (?, 1, ?)",
                    (name, self._encode(header)),
                )

    def row_count(self, name: str) -> int:
        with self._cursor() as cursor:
            self._require_partition(cursor, name)
            row = cursor.execute(
                "SELECT COALESCE(MAX(row_number), 0) AS last_row FROM partition_rows WHERE partition = ?",
                (name,),
            ).fetchone()
        return int(row["last_row"])

    def read_rows(self, name: str, start_row: int, count: int) -> List[Row]:
        if start_row < 1 or count < 0:
            raise StoreError(f"Invalid row window {start_row}+{count} for {name}")
        with self._cursor() as cursor:
            self._require_partition(cursor, name)
            rows = cursor.execute(
                """
                SELECT cells FROM partition_rows
                WHERE partition = ? AND row_number >= ? AND row_number < ?
                ORDER BY row_number
                """,
                (name, start_row, start_row + count),
            ).fetchall()
        return [json.loads(row["cells"]) for row in rows]

    def find_row(self, name: str, column: int, value: str) -> Optional[int]:
        if column < 1:
            raise StoreError(f"Invalid column {column}")
        with self._cursor() as cursor:
            self._require_partition(cursor, name)
            row = cursor.execute(
                """
                SELECT row_number FROM partition_rows
                WHERE partition = ? AND row_number > 1
                  AND CAST(json_extract(cells, ?) AS TEXT) = ?
                ORDER BY row_number
                LIMIT 1
                """,
                (name, f"$[{column - 1}]", value),
            ).fetchone()
        return int(row["row_number"]) if row else None

    def append_row(self, name: str, values: Sequence[Cell]) -> int:
        with self._cursor() as cursor:
            self._require_partition(cursor, name)
            cursor.execute(
                """
                INSERT INTO partition_rows (partition, row_number, cells)
                SELECT ?, COALESCE(MAX(row_number), 0) + 1, ?
                FROM partition_rows WHERE partition = ?
                """,
                (name, self._encode(values), name),
            )
            row = cursor.execute(
                "SELECT MAX(row_number) AS last_row FROM partition_rows WHERE partition = ?",
                (name,),
            ).fetchone()
        return int(row["last_row"])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        try:
            with get_cursor(self.db_path) as cursor:
                yield cursor
        except sqlite3.Error as e:
            raise StoreError(f"Record store error ({self.db_path}): {e}") from e

    @staticmethod
    def _require_partition(cursor: sqlite3.Cursor, name: str) -> None:
        if not cursor.execute("SELECT 1 FROM partitions WHERE name = ?", (name,)).fetchone():
            raise StoreError(f"Partition {name} does not exist")

    @staticmethod
    def _encode(values: Sequence[Cell]) -> str:
        return json.dumps(list(values), ensure_ascii=False, default=str)
