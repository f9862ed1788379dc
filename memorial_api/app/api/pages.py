"""
Routes served at the site root.

The website was built against a single URL: ``GET /`` returns the page,
``GET /?action=getGuestbook`` returns the guestbook as JSON and
``POST /`` submits a guestbook entry.  These handlers keep that surface
working on top of the same services as the v1 API.  Unlike the v1
routes, guestbook answers here are always 200 whatever the outcome;
the website reads the ``result`` field.
"""

import html
import logging
import re
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from memorial_api.app.api.deps import get_guestbook_service, get_settings, read_submission
from memorial_api.app.core.config import Settings
from memorial_api.app.core.exceptions import InvalidInputError
from memorial_api.app.services.guestbook_service import GuestbookService
from memorial_api.app.services.results import Outcome, SubmissionResult

router = APIRouter()

GET_GUESTBOOK_ACTION = "getGuestbook"
# Lets the page be embedded in a frame on any site.
EMBED_HEADERS = {"Content-Security-Policy": "frame-ancestors *"}
_TITLE_RE = re.compile(r"<title>.*?</title>", re.IGNORECASE | re.DOTALL)


def render_page(settings: Settings) -> str:
    """Return the site page with its ``<title>`` set from the settings."""
    content = Path(settings.page_path).read_text(encoding="utf-8")
    title = f"<title>{html.escape(settings.page_title)}</title>"
    if _TITLE_RE.search(content):
        return _TITLE_RE.sub(lambda _: title, content, count=1)
    return content


@router.get("/", include_in_schema=False)
def index(
    action: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    service: GuestbookService = Depends(get_guestbook_service),
) -> Response:
    logger = logging.getLogger(__name__)
    try:
        if action == GET_GUESTBOOK_ACTION:
            entries = service.recent()
            return JSONResponse([entry.model_dump(mode="json", by_alias=True) for entry in entries])
        return HTMLResponse(render_page(settings), headers=EMBED_HEADERS)
    except Exception as e:
        logger.error("Critical error serving %s: %s", action or "page", e, exc_info=True)
        return PlainTextResponse(f"System Error: {e}", status_code=500)


@router.post("/", include_in_schema=False)
async def submit(
    request: Request,
    service: GuestbookService = Depends(get_guestbook_service),
) -> JSONResponse:
    try:
        submission = await read_submission(request)
    except InvalidInputError as e:
        result = SubmissionResult(Outcome.INVALID, error=e.message)
    else:
        result = await run_in_threadpool(service.submit, submission)
    return JSONResponse(result.to_response().model_dump(exclude_none=True))
