"""
Storage backends for student records, the guestbook log and images.

``build_record_store`` and ``build_blob_store`` pick an implementation
from the settings; everything else in the application talks to the
``RecordStore`` / ``BlobStore`` interfaces only.
"""

from ..core.config import Settings
from .base import BlobStore, RecordStore
from .drive_blob import DriveBlobStore
from .google_api import GoogleAPIClient
from .local_blob import LocalBlobStore
from .sheets_store import GoogleSheetsRecordStore
from .sqlite_store import SQLiteRecordStore


def _google_client(settings: Settings) -> GoogleAPIClient:
    return GoogleAPIClient(
        access_token=settings.google_access_token,
        timeout=settings.google_request_timeout,
    )


def build_record_store(settings: Settings) -> RecordStore:
    backend = settings.record_store_backend.lower()
    if backend == "sqlite":
        return SQLiteRecordStore(settings.database_url)
    if backend == "sheets":
        return GoogleSheetsRecordStore(settings.spreadsheet_id, _google_client(settings))
    raise ValueError(f"Unknown RECORD_STORE_BACKEND: {settings.record_store_backend}")


def build_blob_store(settings: Settings) -> BlobStore:
    backend = settings.blob_store_backend.lower()
    if backend == "local":
        return LocalBlobStore(settings.media_dir, settings.public_base_url)
    if backend == "drive":
        return DriveBlobStore(
            _google_client(settings),
            folder_id=settings.guestbook_image_folder_id,
            folder_name=settings.guestbook_image_folder_name,
        )
    raise ValueError(f"Unknown BLOB_STORE_BACKEND: {settings.blob_store_backend}")


__all__ = [
    "BlobStore",
    "RecordStore",
    "SQLiteRecordStore",
    "GoogleSheetsRecordStore",
    "LocalBlobStore",
    "DriveBlobStore",
    "build_record_store",
    "build_blob_store",
]
