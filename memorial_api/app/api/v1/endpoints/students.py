"""
API endpoints for the private student content lookup.

Both routes answer with ``{"status": "success", "data": {...}}``,
``{"status": "not_found", "message": ...}`` or ``{"status": "error",
"message": ...}``.  The POST form exists for pages that prefer not to
put student IDs into URLs.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from memorial_api.app.api.deps import OUTCOME_STATUS_CODES, get_student_service
from memorial_api.app.schemas.student import StudentLookupRequest, StudentLookupResponse
from memorial_api.app.services.results import LookupResult
from memorial_api.app.services.student_service import StudentService


router = APIRouter()


def _respond(result: LookupResult) -> JSONResponse:
    return JSONResponse(
        status_code=OUTCOME_STATUS_CODES[result.outcome],
        content=result.to_response().model_dump(by_alias=True, exclude_none=True),
    )


@router.get(
    "/{student_id}",
    response_model=StudentLookupResponse,
    response_model_exclude_none=True,
    summary="Look up a student's private content",
)
def get_student(
    student_id: str,
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    return _respond(service.find_student(student_id))


@router.post(
    "/lookup",
    response_model=StudentLookupResponse,
    response_model_exclude_none=True,
    summary="Look up a student's private content (ID in the body)",
)
def lookup_student(
    data: StudentLookupRequest,
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    return _respond(service.find_student(data.student_id))
