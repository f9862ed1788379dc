"""
Business logic for the public guestbook.

Entries are rows of an append-only guestbook partition with the
columns ``Timestamp, Name, Role, Message, Date, ImageURL``.  Writes go
through the process-wide :class:`WriteGate`; inside it a submission is
validated, checked for profanity, its optional image is stored
(best-effort) and the row is appended.  Reads are not gated and only
fetch the newest rows.

Both public operations return results instead of raising: ``submit``
returns a :class:`SubmissionResult`, and ``recent`` returns a list that
carries a synthetic "System Error" entry if the store fails.
"""

import base64
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from ..core.config import Settings
from ..core.exceptions import BlobStoreError, InvalidInputError, ServerBusyError
from ..core.gate import WriteGate
from ..core.profanity import contains_profanity
from ..schemas.guestbook import GuestbookEntry, GuestbookSubmission
from ..stores.base import BlobStore, RecordStore, Row
from .results import Outcome, SubmissionResult

GUESTBOOK_HEADER = ["Timestamp", "Name", "Role", "Message", "Date", "ImageURL"]
DEFAULT_ROLE = "friend"
# Lengths count Unicode code points, so an emoji is one character.
MAX_NAME_LENGTH = 50
MAX_MESSAGE_LENGTH = 500
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NAME_INVALID_MESSAGE = "ชื่อต้องไม่ว่างและไม่เกิน 50 ตัวอักษร"
MESSAGE_INVALID_MESSAGE = "ข้อความต้องไม่ว่างและไม่เกิน 500 ตัวอักษร"
PROFANITY_MESSAGE = "โปรดใช้ถ้อยคำที่สุภาพ (Please use polite language)"

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
DEFAULT_IMAGE_TYPE = "image/jpeg"
_DATA_URL_TYPE_RE = re.compile(r"^data:([\w.+-]+/[\w.+-]+)")
# Day zero of spreadsheet date serial numbers.
SERIAL_DATE_EPOCH = datetime(1899, 12, 30)


def validate_submission(submission: GuestbookSubmission) -> None:
    """Raise ``InvalidInputError`` if the submission may not be stored."""
    if not submission.name or len(submission.name) > MAX_NAME_LENGTH:
        raise InvalidInputError(NAME_INVALID_MESSAGE)
    if not submission.message or len(submission.message) > MAX_MESSAGE_LENGTH:
        raise InvalidInputError(MESSAGE_INVALID_MESSAGE)
    if contains_profanity(submission.message) or contains_profanity(submission.name):
        raise InvalidInputError(PROFANITY_MESSAGE)


def decode_image_payload(payload: str) -> Tuple[bytes, str]:
    """Decode a base64 image, optionally prefixed by a ``data:...,`` header.

    Returns the raw bytes and the content type named in the header
    (``image/jpeg`` when there is none).
    """
    header, sep, data = payload.partition(",")
    if not sep:
        header, data = "", payload
    content_type = DEFAULT_IMAGE_TYPE
    match = _DATA_URL_TYPE_RE.match(header.strip())
    if match:
        content_type = match.group(1).lower()
    # Line-wrapped payloads are fine; any other non-alphabet character is not.
    return base64.b64decode("".join(data.split()), validate=True), content_type


def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return default
    return str(value)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GuestbookService:
    """Service for writing and reading guestbook entries."""

    def __init__(
        self,
        settings: Settings,
        store: RecordStore,
        blob_store: BlobStore,
        gate: WriteGate,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.settings = settings
        self.store = store
        self.blob_store = blob_store
        self.gate = gate
        self.clock = clock
        self.tz = ZoneInfo(settings.time_zone)
        self._last_timestamp: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------
    def submit(self, submission: GuestbookSubmission) -> SubmissionResult:
        """Validate and append a guestbook entry.

        Waits for the write gate for at most ``lock_timeout_seconds``;
        a timeout yields ``BUSY`` without touching the store.
        """
        try:
            with self.gate.hold(self.settings.lock_timeout_seconds):
                return self._submit_locked(submission)
        except ServerBusyError as e:
            return SubmissionResult(Outcome.BUSY, error=e.message)

    def _submit_locked(self, submission: GuestbookSubmission) -> SubmissionResult:
        logger = logging.getLogger(__name__)
        try:
            validate_submission(submission)
        except InvalidInputError as e:
            logger.info("Guestbook submission rejected: %s", e.message)
            return SubmissionResult(Outcome.INVALID, error=e.message)

        try:
            timestamp = self._next_timestamp()
            image_url = ""
            image_persisted: Optional[bool] = None
            if submission.image:
                image_url = self._store_image(submission.image, timestamp)
                image_persisted = bool(image_url)

            partition = self._guestbook_partition(create=True)
            row = [
                timestamp.isoformat(timespec="milliseconds"),
                submission.name,
                submission.role or DEFAULT_ROLE,
                submission.message,
                timestamp.astimezone(self.tz).strftime(DATE_FORMAT),
                image_url,
            ]
            row_number = self.store.append_row(partition, row)
        except Exception as e:
            logger.error("Failed to save guestbook entry: %s", e, exc_info=True)
            return SubmissionResult(Outcome.ERROR, error=str(e) or type(e).__name__)

        logger.info(
            "Guestbook entry from %r appended at row %s (image: %s)",
            submission.name,
            row_number,
            "none" if image_persisted is None else ("stored" if image_persisted else "failed"),
        )
        return SubmissionResult(
            Outcome.SUCCESS,
            text_persisted=True,
            image_persisted=image_persisted,
            image_url=image_url,
            row_number=row_number,
        )

    def _next_timestamp(self) -> datetime:
        """Return the creation time for a new entry.

        Called with the gate held.  Timestamps strictly increase (by at
        least a millisecond) so append order and image names stay
        consistent even if the clock steps back.
        """
        now = self.clock().astimezone(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(milliseconds=1)
        self._last_timestamp = now
        return now

    def _store_image(self, payload: str, timestamp: datetime) -> str:
        """Store the image and return its URL, or ``""`` if that fails."""
        logger = logging.getLogger(__name__)
        try:
            content, content_type = decode_image_payload(payload)
            if not content:
                raise BlobStoreError("Image payload is empty")
            if len(content) > self.settings.max_image_bytes:
                raise BlobStoreError(
                    f"Image is {len(content)} bytes; the limit is {self.settings.max_image_bytes}"
                )
            millis = int(timestamp.timestamp() * 1000)
            extension = IMAGE_EXTENSIONS.get(content_type, ".jpg")
            return self.blob_store.put(f"guestbook_{millis}{extension}", content, content_type)
        except Exception as e:
            logger.warning("Guestbook image not stored, saving entry without it: %s", e, exc_info=True)
            return ""

    def _guestbook_partition(self, create: bool = False) -> Optional[str]:
        name = self.settings.guestbook_tab_name
        partition = self.store.find_partition(name, case_insensitive=True)
        if partition is None and create:
            logging.getLogger(__name__).info("Creating guestbook partition %s", name)
            self.store.create_partition(name, GUESTBOOK_HEADER)
            partition = name
        return partition

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------
    def recent(self) -> List[GuestbookEntry]:
        """Return the newest entries, newest first.

        At most ``guestbook_recent_limit`` rows are read from the tail
        of the partition.  A missing or header-only partition yields
        ``[]``; a store failure yields one "System Error" entry.
        """
        logger = logging.getLogger(__name__)
        try:
            partition = self._guestbook_partition()
            if partition is None:
                logger.info("Guestbook partition %s not found", self.settings.guestbook_tab_name)
                return []
            last_row = self.store.row_count(partition)
            if last_row < 2:
                return []
            limit = max(1, self.settings.guestbook_recent_limit)
            start_row = max(2, last_row - limit + 1)
            rows = self.store.read_rows(partition, start_row, last_row - start_row + 1)
            return [self._entry_from_row(row) for row in reversed(rows)]
        except Exception as e:
            logger.error("Error reading guestbook: %s", e, exc_info=True)
            return [
                GuestbookEntry(
                    timestamp=self.clock(),
                    name="System Error",
                    role="secret",
                    message=f"Error: {str(e) or type(e).__name__}",
                )
            ]

    def _entry_from_row(self, row: Row) -> GuestbookEntry:
        cells = list(row) + [None] * (len(GUESTBOOK_HEADER) - len(row))
        return GuestbookEntry(
            timestamp=self._parse_timestamp(cells[0]),
            name=_text(cells[1], "Unknown"),
            role=_text(cells[2], DEFAULT_ROLE),
            message=_text(cells[3]),
            date_str=_text(cells[4]),
            image_url=_text(cells[5]),
        )

    def _parse_timestamp(self, value: Any) -> datetime:
        """Parse a stored timestamp; unreadable values become the current time."""
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            # Date cells read back as serial days in the sheet's local time.
            try:
                parsed = SERIAL_DATE_EPOCH + timedelta(milliseconds=round(value * 86_400_000))
            except (OverflowError, ValueError):
                return self.clock()
        elif isinstance(value, str) and value.strip():
            try:
                parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            except ValueError:
                return self.clock()
        else:
            return self.clock()
        if parsed.tzinfo is None:
            # Naive values were typed into the sheet in local time.
            parsed = parsed.replace(tzinfo=self.tz)
        return parsed.astimezone(timezone.utc)
