"""
Application exceptions.

Services raise these internally and convert them into tagged results
at their public boundary, so none of them should ever reach a route
handler.  ``code`` mirrors the HTTP status the v1 API reports for the
corresponding outcome.
"""


class AppException(Exception):
    """Base class for errors raised by the memorial backend."""

    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL_ERROR = 500
    SERVICE_UNAVAILABLE = 503

    def __init__(self, message: str, code: int = INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidInputError(AppException):
    """User input failed validation (length, emptiness, profanity)."""

    def __init__(self, message: str):
        super().__init__(message, AppException.BAD_REQUEST)


class ServerBusyError(AppException):
    """The write gate could not be acquired in time."""

    def __init__(self, message: str = "Server is busy, please try again later."):
        super().__init__(message, AppException.SERVICE_UNAVAILABLE)


class StoreError(AppException):
    """The record store could not complete an operation."""


class SchemaError(StoreError):
    """A partition does not carry the columns a decoder expects."""


class BlobStoreError(AppException):
    """The blob store could not persist or publish an asset."""
