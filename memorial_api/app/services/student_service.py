"""
Business logic for the private student content lookup.

A student enters their ID on the site; the service scans the class
partitions in their configured order and returns the name, class,
video link and letter stored on the first matching row.  Rows are
decoded by header name, so a partition whose header lacks one of the
expected columns is reported as an error instead of silently
producing empty fields.
"""

import logging
from typing import Dict, List, Sequence

from ..core.config import Settings
from ..core.exceptions import SchemaError
from ..schemas.student import StudentRecord
from ..stores.base import RecordStore, Row
from .results import LookupResult, Outcome

EMPTY_ID_MESSAGE = "กรุณากรอกเลขประจำตัวนักเรียน"
NOT_FOUND_MESSAGE = "ไม่พบเลขประจำตัวนักเรียนนี้ในระบบ (ค้นหาในห้อง {searched} แล้ว)"
LOOKUP_ERROR_MESSAGE = "เกิดข้อผิดพลาดในการดึงข้อมูล: {error}"

# Header label -> StudentRecord attribute.  Lookups search column A,
# so ID has to be the first column of every class partition.
STUDENT_COLUMNS = (
    ("ID", "student_id"),
    ("Name", "name"),
    ("Class", "class_name"),
    ("VideoLink", "video_link"),
    ("LetterText", "letter_text"),
)


def _normalise_label(label: object) -> str:
    return str(label or "").strip().replace(" ", "").replace("_", "").casefold()


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def describe_partitions(names: Sequence[str]) -> str:
    """Render partition names the way the site labels classes (``6_1`` -> ``6/1``)."""
    labels = [name.replace("_", "/") for name in names]
    if not labels:
        return "-"
    if len(labels) == 1:
        return labels[0]
    return f"{labels[0]} - {labels[-1]}"


class StudentService:
    """Service for looking up a student's private content."""

    def __init__(self, settings: Settings, store: RecordStore) -> None:
        self.settings = settings
        self.store = store

    def find_student(self, student_id: object) -> LookupResult:
        """Find the record for ``student_id`` across the class partitions.

        Never raises: empty input yields ``INVALID``, no match yields
        ``NOT_FOUND`` and any store or schema fault yields ``ERROR``.
        """
        logger = logging.getLogger(__name__)
        trimmed = _cell_text(student_id).strip()
        if not trimmed:
            return LookupResult(Outcome.INVALID, message=EMPTY_ID_MESSAGE)

        logger.info("Looking up student ID %s", trimmed)
        try:
            for partition in self.settings.data_tab_names:
                if self.store.find_partition(partition) is None:
                    logger.warning("Class partition %s does not exist; skipping", partition)
                    continue
                row_number = self.store.find_row(partition, 1, trimmed)
                if row_number is None:
                    continue
                record = self._read_record(partition, row_number)
                logger.info("Student %s found in partition %s (row %s)", trimmed, partition, row_number)
                return LookupResult(Outcome.SUCCESS, record=record)
        except Exception as e:
            logger.error("Student lookup for %s failed: %s", trimmed, e, exc_info=True)
            return LookupResult(
                Outcome.ERROR, message=LOOKUP_ERROR_MESSAGE.format(error=str(e) or type(e).__name__)
            )

        logger.info("Student %s not found", trimmed)
        searched = describe_partitions(self.settings.data_tab_names)
        return LookupResult(Outcome.NOT_FOUND, message=NOT_FOUND_MESSAGE.format(searched=searched))

    def _read_record(self, partition: str, row_number: int) -> StudentRecord:
        header = self.store.read_rows(partition, 1, 1)
        rows = self.store.read_rows(partition, row_number, 1)
        if not header:
            raise SchemaError(f"Partition {partition} has no header row")
        columns = self._column_map(partition, header[0])
        row: Row = rows[0] if rows else []
        values: Dict[str, str] = {}
        for label, attribute in STUDENT_COLUMNS:
            index = columns[label]
            values[attribute] = _cell_text(row[index]) if index < len(row) else ""
        return StudentRecord(partition=partition, **values)

    @staticmethod
    def _column_map(partition: str, header: Row) -> Dict[str, int]:
        """Map each expected column label to its 0-based index in ``header``."""
        positions = {}
        for index, label in enumerate(header):
            positions.setdefault(_normalise_label(label), index)
        missing: List[str] = [
            label for label, _ in STUDENT_COLUMNS if _normalise_label(label) not in positions
        ]
        if missing:
            raise SchemaError(
                f"Partition {partition} is missing column(s): {', '.join(missing)}"
            )
        if positions[_normalise_label("ID")] != 0:
            raise SchemaError(f"Partition {partition} must have ID as its first column")
        return {label: positions[_normalise_label(label)] for label, _ in STUDENT_COLUMNS}
