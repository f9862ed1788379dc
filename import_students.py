#!/usr/bin/env python3
"""
Load a class roster CSV into the SQLite record store.

The CSV must start with a header row containing at least the columns
ID, Name, Class, VideoLink and LetterText (ID first).  Rows are appended
to the given partition, which is created with the CSV header when it
does not exist yet.  Existing rows are never modified.

Usage:
    python import_students.py --db ./memorial.db --partition 6_1 --csv room_6_1.csv
"""

import argparse
import csv
import os
import sys
from typing import List, Optional

from memorial_api.app.core.exceptions import StoreError
from memorial_api.app.stores.sqlite_store import SQLiteRecordStore


def import_roster(store: SQLiteRecordStore, partition: str, csv_path: str) -> int:
    """Append every data row of ``csv_path`` to ``partition``; return the row count."""
    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        rows: List[List[str]] = [row for row in csv.reader(f) if any(cell.strip() for cell in row)]
    if not rows:
        raise StoreError(f"{csv_path} is empty")
    header, data = rows[0], rows[1:]
    if store.find_partition(partition) is None:
        store.create_partition(partition, header)
    else:
        existing = store.read_rows(partition, 1, 1)
        if existing and [str(c) for c in existing[0]] != header:
            raise StoreError(
                f"Header of {csv_path} does not match partition {partition}: {existing[0]} != {header}"
            )
    for row in data:
        store.append_row(partition, row)
    return len(data)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Import a class roster CSV into the memorial SQLite store.")
    ap.add_argument("--db", required=True, help="Path to the SQLite DB file (e.g., ./memorial.db)")
    ap.add_argument("--partition", required=True, help="Class partition name (e.g., 6_1)")
    ap.add_argument("--csv", required=True, dest="csv_path", help="Roster CSV with a header row")
    args = ap.parse_args(argv)

    if not os.path.exists(args.csv_path):
        print(f"[!] CSV not found: {args.csv_path}", file=sys.stderr)
        return 1

    store = SQLiteRecordStore(args.db)
    store.initialize()
    try:
        count = import_roster(store, args.partition, args.csv_path)
    except StoreError as e:
        print(f"[!] {e.message}", file=sys.stderr)
        return 2
    print(f"[+] Imported {count} student(s) into {args.partition}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
