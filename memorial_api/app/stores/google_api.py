"""Thin ``requests`` wrapper shared by the Google Sheets and Drive stores.

Both Google backends talk plain REST with an OAuth bearer token taken
from the settings.  This module centralises the session, the
``Authorization`` header, timeouts and the translation of HTTP
failures into :class:`GoogleAPIError`, whose message carries Google's
own ``error.message`` when the response has one.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..core.exceptions import AppException

logger = logging.getLogger(__name__)


class GoogleAPIError(AppException):
    """A Google REST call failed or returned an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, AppException.INTERNAL_ERROR)
        self.status_code = status_code


class GoogleAPIClient:
    """Minimal authenticated client for Google REST endpoints."""

    def __init__(
        self,
        *,
        access_token: str,
        timeout: int = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
        data: bytes | None = None,
        headers: Dict[str, str] | None = None,
    ) -> Any:
        """Perform a request and return the decoded JSON body (or ``None``).

        Raises:
            GoogleAPIError: on transport failures and non-2xx responses.
        """
        if not self.access_token:
            raise GoogleAPIError("GOOGLE_ACCESS_TOKEN is not configured")
        all_headers = {"Authorization": f"Bearer {self.access_token}"}
        if headers:
            all_headers.update(headers)
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                data=data,
                headers=all_headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = self._error_message(exc.response) or str(exc)
            logger.error("Google API request failed (%s): %s", status, message)
            raise GoogleAPIError(message, status) from exc
        except requests.RequestException as exc:
            logger.error("Google API request failed: %s", exc)
            raise GoogleAPIError(str(exc)) from exc
        if response.content:
            return response.json()
        return None

    @staticmethod
    def _error_message(response: Optional[requests.Response]) -> str:
        if response is None:
            return ""
        try:
            body = response.json()
        except ValueError:
            return response.text
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get("message") or str(error)
        return str(error or body)
