"""
Google Sheets record store.

Maps the ``RecordStore`` contract onto the Sheets REST API (v4): a
partition is a tab of the configured spreadsheet, rows are sheet rows
and row 1 is the header.  Values are written with ``RAW`` input so
ISO timestamps stay strings.  ID matching reads formatted values so it
compares what a person sees in the sheet; row reads use unformatted
values, so date cells come back as spreadsheet serial numbers (days
since 1899-12-30 in the sheet's time zone) instead of locale strings.
"""

import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence
from urllib.parse import quote

from ..core.exceptions import StoreError
from .base import Cell, RecordStore, Row
from .google_api import GoogleAPIClient, GoogleAPIError

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"

_UPDATED_RANGE_RE = re.compile(r"![A-Z]+(\d+)")


def column_letter(column: int) -> str:
    """Convert a 1-based column index into A1 letters (1 -> A, 27 -> AA)."""
    letters = ""
    while column > 0:
        column, remainder = divmod(column - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def quote_sheet_name(name: str) -> str:
    return "'" + name.replace("'", "''") + "'"


class GoogleSheetsRecordStore(RecordStore):
    """Record store backed by the tabs of one Google spreadsheet."""

    def __init__(self, spreadsheet_id: str, client: GoogleAPIClient) -> None:
        if not spreadsheet_id:
            raise StoreError("SPREADSHEET_ID is required for the sheets record store")
        self.spreadsheet_id = spreadsheet_id
        self.client = client
        self.base_url = f"{SHEETS_API_URL}/{spreadsheet_id}"

    def list_partitions(self) -> List[str]:
        with self._translate_errors():
            data = self.client.request(
                "GET", self.base_url, params={"fields": "sheets.properties.title"}
            ) or {}
        return [sheet["properties"]["title"] for sheet in data.get("sheets", [])]

    def find_partition(self, name: str, case_insensitive: bool = False) -> Optional[str]:
        for title in self.list_partitions():
            if title == name or (case_insensitive and title.casefold() == name.casefold()):
                return title
        return None

    def create_partition(self, name: str, header: Optional[Sequence[Cell]] = None) -> None:
        logger = logging.getLogger(__name__)
        with self._translate_errors():
            self.client.request(
                "POST",
                f"{self.base_url}:batchUpdate",
                json_body={"requests": [{"addSheet": {"properties": {"title": name}}}]},
            )
        logger.info("Created sheet %s in spreadsheet %s", name, self.spreadsheet_id)
        if header:
            self.append_row(name, header)

    def row_count(self, name: str) -> int:
        return len(self._get_values(f"{quote_sheet_name(name)}!A:A"))

    def read_rows(self, name: str, start_row: int, count: int) -> List[Row]:
        if start_row < 1 or count < 0:
            raise StoreError(f"Invalid row window {start_row}+{count} for {name}")
        if count == 0:
            return []
        end_row = start_row + count - 1
        return self._get_values(
            f"{quote_sheet_name(name)}!{start_row}:{end_row}", formatted=False
        )

    def find_row(self, name: str, column: int, value: str) -> Optional[int]:
        letter = column_letter(column)
        cells = self._get_values(f"{quote_sheet_name(name)}!{letter}:{letter}")
        # Index 0 is the header row.
        for index, row in enumerate(cells[1:], start=2):
            if row and str(row[0]) == value:
                return index
        return None

    def append_row(self, name: str, values: Sequence[Cell]) -> int:
        range_ = quote(f"{quote_sheet_name(name)}!A1", safe="")
        with self._translate_errors():
            data = self.client.request(
                "POST",
                f"{self.base_url}/values/{range_}:append",
                params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
                json_body={"values": [[self._cell(v) for v in values]]},
            ) or {}
        updated_range = data.get("updates", {}).get("updatedRange", "")
        match = _UPDATED_RANGE_RE.search(updated_range)
        if match:
            return int(match.group(1))
        return self.row_count(name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _get_values(self, a1_range: str, formatted: bool = True) -> List[Row]:
        params: Dict[str, Any] = {"majorDimension": "ROWS"}
        if formatted:
            params["valueRenderOption"] = "FORMATTED_VALUE"
        else:
            params["valueRenderOption"] = "UNFORMATTED_VALUE"
            params["dateTimeRenderOption"] = "SERIAL_NUMBER"
        with self._translate_errors():
            data = self.client.request(
                "GET",
                f"{self.base_url}/values/{quote(a1_range, safe='')}",
                params=params,
            ) or {}
        # The API omits "values" entirely for an empty range.
        return data.get("values", [])

    @staticmethod
    def _cell(value: Cell) -> Cell:
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        return str(value)

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        try:
            yield
        except GoogleAPIError as e:
            raise StoreError(f"Google Sheets error: {e.message}") from e
