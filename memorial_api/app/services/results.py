"""
Tagged results returned by the public service operations.

Services never let an exception escape to their callers; instead each
operation returns one of these objects.  ``Outcome`` is the internal
tag; ``to_response`` renders the wire shape the website expects, in
which an invalid input and an internal fault both appear as
``"error"``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..schemas.guestbook import SubmissionResponse
from ..schemas.student import StudentData, StudentLookupResponse, StudentRecord


class Outcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    BUSY = "busy"
    ERROR = "error"


@dataclass
class SubmissionResult:
    """Outcome of a guestbook submission.

    ``image_persisted`` is ``None`` when no image was sent, ``False``
    when one was sent but could not be stored (the entry is still
    written, with an empty image URL).
    """

    outcome: Outcome
    error: Optional[str] = None
    text_persisted: bool = False
    image_persisted: Optional[bool] = None
    image_url: str = ""
    row_number: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    def to_response(self) -> SubmissionResponse:
        if self.ok:
            return SubmissionResponse(result="success")
        return SubmissionResponse(result="error", error=self.error)


@dataclass
class LookupResult:
    """Outcome of a student lookup."""

    outcome: Outcome
    record: Optional[StudentRecord] = None
    message: Optional[str] = None

    def to_response(self) -> StudentLookupResponse:
        if self.outcome is Outcome.SUCCESS and self.record is not None:
            return StudentLookupResponse(status="success", data=StudentData.from_record(self.record))
        if self.outcome is Outcome.NOT_FOUND:
            return StudentLookupResponse(status="not_found", message=self.message)
        return StudentLookupResponse(status="error", message=self.message)
