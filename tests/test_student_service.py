import tempfile
import unittest
from unittest.mock import MagicMock

from memorial_api.app.core.exceptions import StoreError
from memorial_api.app.services.results import Outcome
from memorial_api.app.services.student_service import (
    EMPTY_ID_MESSAGE,
    StudentService,
    describe_partitions,
)
from memorial_api.app.stores.base import RecordStore
from memorial_api.app.stores.sqlite_store import SQLiteRecordStore

from helpers import CLASS_HEADER, make_settings


class TestStudentService(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.settings = make_settings(tmp.name)
        self.store = SQLiteRecordStore(self.settings.database_url)
        self.store.initialize()
        for partition in self.settings.data_tab_names:
            self.store.create_partition(partition, CLASS_HEADER)
        self.store.append_row("6_1", ["65001", "Anan", "6/1", "https://v.example/a", "Dear Anan"])
        self.store.append_row(
            "6_3", ["12345", "Somsri", "6/3", "https://v.example/s", "Dear Somsri"]
        )
        self.service = StudentService(self.settings, self.store)

    def test_finds_student_in_later_partition(self):
        result = self.service.find_student("12345")
        self.assertEqual(result.outcome, Outcome.SUCCESS)
        self.assertEqual(result.record.partition, "6_3")
        self.assertEqual(result.record.name, "Somsri")
        self.assertEqual(
            result.to_response().model_dump(by_alias=True, exclude_none=True),
            {
                "status": "success",
                "data": {
                    "name": "Somsri",
                    "class": "6/3",
                    "teacherVtrLink": "https://v.example/s",
                    "privateLetterText": "Dear Somsri",
                },
            },
        )

    def test_input_is_trimmed(self):
        result = self.service.find_student("  12345 ")
        self.assertEqual(result.outcome, Outcome.SUCCESS)
        self.assertEqual(result.record.student_id, "12345")

    def test_numeric_input_is_matched_as_text(self):
        result = self.service.find_student(65001)
        self.assertEqual(result.outcome, Outcome.SUCCESS)
        self.assertEqual(result.record.name, "Anan")

    def test_match_is_exact(self):
        self.assertEqual(self.service.find_student("1234").outcome, Outcome.NOT_FOUND)
        self.assertEqual(self.service.find_student("123456").outcome, Outcome.NOT_FOUND)

    def test_not_found_names_searched_classes(self):
        result = self.service.find_student("99999")
        self.assertEqual(result.outcome, Outcome.NOT_FOUND)
        self.assertIn("6/1 - 6/3", result.message)
        self.assertEqual(result.to_response().status, "not_found")

    def test_empty_and_whitespace_ids_are_invalid_without_scanning(self):
        store = MagicMock(spec=RecordStore)
        service = StudentService(self.settings, store)
        for value in ("", "   ", None):
            with self.subTest(value=value):
                result = service.find_student(value)
                self.assertEqual(result.outcome, Outcome.INVALID)
                self.assertEqual(result.message, EMPTY_ID_MESSAGE)
                self.assertEqual(result.to_response().status, "error")
        store.find_partition.assert_not_called()
        store.find_row.assert_not_called()

    def test_first_partition_wins_for_duplicate_ids(self):
        self.store.append_row("6_2", ["65001", "Other Anan", "6/2", "", ""])
        result = self.service.find_student("65001")
        self.assertEqual(result.record.partition, "6_1")
        self.assertEqual(result.record.name, "Anan")

    def test_missing_partition_is_skipped(self):
        settings = make_settings(
            tempfile.gettempdir(),
            database_url=self.settings.database_url,
            data_tab_names=("6_0", "6_3"),
        )
        result = StudentService(settings, self.store).find_student("12345")
        self.assertEqual(result.outcome, Outcome.SUCCESS)

    def test_blank_cells_become_empty_strings(self):
        self.store.append_row("6_2", ["55555", "Short Row"])
        result = self.service.find_student("55555")
        self.assertEqual(result.outcome, Outcome.SUCCESS)
        self.assertEqual(result.record.class_name, "")
        self.assertEqual(result.record.video_link, "")
        self.assertEqual(result.record.letter_text, "")

    def test_columns_are_decoded_by_header(self):
        self.store.create_partition("6_4", ["ID", "Class", "Name", "Letter Text", "Video_Link"])
        self.store.append_row("6_4", ["777", "6/4", "Mali", "Dear Mali", "https://v.example/m"])
        settings = make_settings(
            tempfile.gettempdir(),
            database_url=self.settings.database_url,
            data_tab_names=("6_4",),
        )
        result = StudentService(settings, self.store).find_student("777")
        self.assertEqual(result.record.name, "Mali")
        self.assertEqual(result.record.class_name, "6/4")
        self.assertEqual(result.record.video_link, "https://v.example/m")
        self.assertEqual(result.record.letter_text, "Dear Mali")

    def test_missing_column_is_an_error(self):
        self.store.create_partition("6_9", ["ID", "Name", "Class"])
        self.store.append_row("6_9", ["888", "Nok", "6/9"])
        settings = make_settings(
            tempfile.gettempdir(),
            database_url=self.settings.database_url,
            data_tab_names=("6_9",),
        )
        result = StudentService(settings, self.store).find_student("888")
        self.assertEqual(result.outcome, Outcome.ERROR)
        self.assertIn("VideoLink", result.message)
        self.assertIn("LetterText", result.message)

    def test_store_failure_is_an_error(self):
        store = MagicMock(spec=RecordStore)
        store.find_partition.side_effect = StoreError("Connection lost")
        result = StudentService(self.settings, store).find_student("12345")
        self.assertEqual(result.outcome, Outcome.ERROR)
        self.assertEqual(result.message, "เกิดข้อผิดพลาดในการดึงข้อมูล: Connection lost")
        self.assertEqual(
            result.to_response().model_dump(exclude_none=True),
            {"status": "error", "message": "เกิดข้อผิดพลาดในการดึงข้อมูล: Connection lost"},
        )


class TestDescribePartitions(unittest.TestCase):
    def test_labels(self):
        self.assertEqual(describe_partitions(["6_1"]), "6/1")
        self.assertEqual(describe_partitions([f"6_{i}" for i in range(1, 9)]), "6/1 - 6/8")
        self.assertEqual(describe_partitions([]), "-")


if __name__ == "__main__":
    unittest.main()
