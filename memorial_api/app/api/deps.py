"""
Request-scoped helpers shared by the page routes and the v1 API.

Services are built once in ``create_app`` and kept on ``app.state``;
the dependency functions below hand them to route handlers.
"""

import json

from fastapi import Request
from pydantic import ValidationError

from ..core.config import Settings
from ..core.exceptions import InvalidInputError
from ..schemas.guestbook import GuestbookSubmission
from ..services.guestbook_service import GuestbookService
from ..services.results import Outcome
from ..services.student_service import StudentService

# HTTP status used by the v1 API for each service outcome.
OUTCOME_STATUS_CODES = {
    Outcome.SUCCESS: 200,
    Outcome.NOT_FOUND: 404,
    Outcome.INVALID: 400,
    Outcome.BUSY: 503,
    Outcome.ERROR: 500,
}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_guestbook_service(request: Request) -> GuestbookService:
    return request.app.state.guestbook_service


def get_student_service(request: Request) -> StudentService:
    return request.app.state.student_service


async def read_submission(request: Request) -> GuestbookSubmission:
    """Parse the request body into a ``GuestbookSubmission``.

    The body is read by hand rather than declared as a parameter so a
    malformed body is answered with the guestbook's own error shape
    instead of FastAPI's 422 response.
    """
    raw = await request.body()
    try:
        payload = json.loads(raw or b"{}")
    except ValueError as e:
        raise InvalidInputError(f"Invalid request body: {e}") from e
    if not isinstance(payload, dict):
        raise InvalidInputError("Invalid request body: expected a JSON object")
    try:
        return GuestbookSubmission.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise InvalidInputError(f"Invalid request body: bad value for {fields}") from e
