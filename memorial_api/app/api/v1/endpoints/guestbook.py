"""
API endpoints for the guestbook.

``GET /guestbook`` lists the newest entries (newest first, at most 50)
and ``POST /guestbook`` submits a new one.  Submissions always answer
with ``{"result": ...}``; the HTTP status tells busy (503), invalid
(400) and failed (500) submissions apart.
"""

from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from memorial_api.app.api.deps import (
    OUTCOME_STATUS_CODES,
    get_guestbook_service,
    read_submission,
)
from memorial_api.app.core.exceptions import InvalidInputError
from memorial_api.app.schemas.guestbook import GuestbookEntry, SubmissionResponse
from memorial_api.app.services.guestbook_service import GuestbookService
from memorial_api.app.services.results import Outcome, SubmissionResult


router = APIRouter()


@router.get(
    "",
    response_model=List[GuestbookEntry],
    summary="List recent guestbook entries",
)
def list_entries(
    service: GuestbookService = Depends(get_guestbook_service),
) -> List[GuestbookEntry]:
    """Return the newest guestbook entries, newest first."""
    return service.recent()


@router.post(
    "",
    response_model=SubmissionResponse,
    response_model_exclude_none=True,
    summary="Submit a guestbook entry",
)
async def submit_entry(
    request: Request,
    service: GuestbookService = Depends(get_guestbook_service),
) -> JSONResponse:
    """Validate and store a guestbook entry.

    The write waits for the guestbook gate on a worker thread so the
    event loop keeps serving reads meanwhile.
    """
    try:
        submission = await read_submission(request)
    except InvalidInputError as e:
        result = SubmissionResult(Outcome.INVALID, error=e.message)
    else:
        result = await run_in_threadpool(service.submit, submission)
    return JSONResponse(
        status_code=OUTCOME_STATUS_CODES[result.outcome],
        content=result.to_response().model_dump(exclude_none=True),
    )
