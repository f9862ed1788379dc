import os
import tempfile
import unittest

from memorial_api.app.core.db import init_db
from memorial_api.app.core.exceptions import StoreError
from memorial_api.app.stores.sqlite_store import SQLiteRecordStore

from helpers import CLASS_HEADER


class TestSQLiteRecordStore(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.db_path = os.path.join(tmp.name, "store.db")
        self.store = SQLiteRecordStore(self.db_path)
        self.store.initialize()

    def test_migrations_are_idempotent(self):
        self.assertEqual(init_db(self.db_path), 1)
        self.assertEqual(init_db(self.db_path), 1)

    def test_create_partition_writes_header_as_row_one(self):
        self.store.create_partition("6_1", CLASS_HEADER)
        self.assertEqual(self.store.row_count("6_1"), 1)
        self.assertEqual(self.store.read_rows("6_1", 1, 1), [CLASS_HEADER])

    def test_create_partition_without_header_is_empty(self):
        self.store.create_partition("empty")
        self.assertEqual(self.store.row_count("empty"), 0)
        self.assertEqual(self.store.read_rows("empty", 1, 10), [])

    def test_create_existing_partition_fails(self):
        self.store.create_partition("6_1", CLASS_HEADER)
        with self.assertRaises(StoreError):
            self.store.create_partition("6_1", CLASS_HEADER)

    def test_find_partition(self):
        self.store.create_partition("Guestbook", ["Timestamp"])
        self.assertEqual(self.store.find_partition("Guestbook"), "Guestbook")
        self.assertIsNone(self.store.find_partition("guestbook"))
        self.assertEqual(self.store.find_partition("guestbook", case_insensitive=True), "Guestbook")
        self.assertIsNone(self.store.find_partition("missing", case_insensitive=True))

    def test_append_assigns_consecutive_row_numbers(self):
        self.store.create_partition("6_1", CLASS_HEADER)
        self.assertEqual(self.store.append_row("6_1", ["1", "A", "6/1", "", ""]), 2)
        self.assertEqual(self.store.append_row("6_1", ["2", "B", "6/1", "", ""]), 3)
        self.assertEqual(self.store.row_count("6_1"), 3)

    def test_read_rows_window(self):
        self.store.create_partition("log", ["n"])
        for i in range(10):
            self.store.append_row("log", [i])
        rows = self.store.read_rows("log", 8, 5)
        self.assertEqual(rows, [[6], [7], [8], [9]])

    def test_cells_round_trip_unicode_and_none(self):
        self.store.create_partition("6_1", CLASS_HEADER)
        self.store.append_row("6_1", ["65001", "สมชาย", None, "https://v.example/1", "จดหมาย"])
        self.assertEqual(
            self.store.read_rows("6_1", 2, 1),
            [["65001", "สมชาย", None, "https://v.example/1", "จดหมาย"]],
        )

    def test_find_row_is_exact_and_case_sensitive(self):
        self.store.create_partition("6_1", CLASS_HEADER)
        self.store.append_row("6_1", ["abc", "A"])
        self.store.append_row("6_1", ["ABC", "B"])
        self.store.append_row("6_1", ["abcd", "C"])
        self.assertEqual(self.store.find_row("6_1", 1, "ABC"), 3)
        self.assertEqual(self.store.find_row("6_1", 1, "abc"), 2)
        self.assertIsNone(self.store.find_row("6_1", 1, "ab"))

    def test_find_row_never_matches_header(self):
        self.store.create_partition("6_1", CLASS_HEADER)
        self.assertIsNone(self.store.find_row("6_1", 1, "ID"))

    def test_find_row_returns_first_match_and_other_columns(self):
        self.store.create_partition("6_1", CLASS_HEADER)
        self.store.append_row("6_1", ["1", "Same"])
        self.store.append_row("6_1", ["2", "Same"])
        self.assertEqual(self.store.find_row("6_1", 2, "Same"), 2)

    def test_missing_partition_raises_store_error(self):
        with self.assertRaises(StoreError):
            self.store.row_count("nope")
        with self.assertRaises(StoreError):
            self.store.append_row("nope", ["x"])
        with self.assertRaises(StoreError):
            self.store.find_row("nope", 1, "x")

    def test_in_memory_database_is_rejected(self):
        for url in (":memory:", " :memory: ", "file::memory:?cache=shared", ""):
            with self.subTest(url=url):
                with self.assertRaises(StoreError) as ctx:
                    SQLiteRecordStore(url)
                self.assertIn("in-memory", ctx.exception.message)

    def test_relative_path_is_resolved(self):
        store = SQLiteRecordStore("memorial.db")
        self.assertTrue(os.path.isabs(store.db_path))
        self.assertEqual(os.path.basename(store.db_path), "memorial.db")

    def test_invalid_window_raises_store_error(self):
        self.store.create_partition("6_1", CLASS_HEADER)
        with self.assertRaises(StoreError):
            self.store.read_rows("6_1", 0, 1)


if __name__ == "__main__":
    unittest.main()
