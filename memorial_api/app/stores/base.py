"""
Contracts for the external collaborators.

``RecordStore`` is a narrow, spreadsheet-shaped view of the record
service: named partitions (tabs) holding rows of cells, where row 1 is
the header.  ``BlobStore`` persists binary assets and hands back a URL
anyone holding the link can open.  Services depend only on these two
interfaces, so the SQLite/local pair and the Google Sheets/Drive pair
are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

Cell = Any
Row = List[Cell]


class RecordStore(ABC):
    """Row-oriented access to named partitions."""

    @abstractmethod
    def find_partition(self, name: str, case_insensitive: bool = False) -> Optional[str]:
        """Return the stored name of partition ``name``, or ``None`` if absent."""

    @abstractmethod
    def create_partition(self, name: str, header: Optional[Sequence[Cell]] = None) -> None:
        """Create an empty partition, writing ``header`` as row 1 when given."""

    @abstractmethod
    def row_count(self, name: str) -> int:
        """Return the number of the last non-empty row (0 for an empty partition)."""

    @abstractmethod
    def read_rows(self, name: str, start_row: int, count: int) -> List[Row]:
        """Return ``count`` rows starting at 1-based ``start_row``, in row order."""

    @abstractmethod
    def find_row(self, name: str, column: int, value: str) -> Optional[int]:
        """Return the first data row whose ``column`` cell equals ``value``.

        ``column`` is 1-based.  Matching is exact, whole-cell and
        case-sensitive; the header row is never matched.
        """

    @abstractmethod
    def append_row(self, name: str, values: Sequence[Cell]) -> int:
        """Append ``values`` after the last row; return the new row number."""

    def initialize(self) -> None:
        """Prepare the backing storage.  Called once at application startup."""


class BlobStore(ABC):
    """Write-once storage for binary assets."""

    @abstractmethod
    def put(self, filename: str, content: bytes, content_type: str) -> str:
        """Store ``content`` as a new link-viewable asset and return its URL."""

    def initialize(self) -> None:
        """Prepare the backing storage.  Called once at application startup."""
