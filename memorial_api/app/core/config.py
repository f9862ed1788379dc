"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
application starts against a local SQLite file and a local media
directory without any setup.  A single ``settings`` instance is
created at import time; services and stores receive it explicitly
through their constructors instead of reading globals.
"""

import os
from dataclasses import dataclass
from typing import Tuple


def _split_list(raw: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Memorial API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Identifier of the backing spreadsheet.  Only used by the
    # ``sheets`` record store backend.
    spreadsheet_id: str = os.getenv("SPREADSHEET_ID", "")

    # Class partitions searched by the student lookup, in order.  The
    # first partition containing a matching ID wins.
    data_tab_names: Tuple[str, ...] = _split_list(
        os.getenv("DATA_TAB_NAMES", "6_1,6_2,6_3,6_4,6_5,6_6,6_7,6_8")
    )
    guestbook_tab_name: str = os.getenv("GUESTBOOK_TAB_NAME", "Guestbook")

    # ``sqlite`` keeps partitions in a local database file; ``sheets``
    # talks to Google Sheets.  A relative ``database_url`` is resolved
    # against the current working directory.
    record_store_backend: str = os.getenv("RECORD_STORE_BACKEND", "sqlite")
    database_url: str = os.getenv("DATABASE_URL", "memorial.db")

    # ``local`` writes images to ``media_dir`` and serves them under
    # ``/media``; ``drive`` uploads them to Google Drive.
    blob_store_backend: str = os.getenv("BLOB_STORE_BACKEND", "local")
    media_dir: str = os.getenv("MEDIA_DIR", "media")
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "")
    guestbook_image_folder_id: str = os.getenv("GUESTBOOK_IMAGE_FOLDER_ID", "")
    guestbook_image_folder_name: str = os.getenv("GUESTBOOK_IMAGE_FOLDER_NAME", "Guestbook_Images")

    # OAuth bearer token for the Google backends.  Obtaining and
    # refreshing it is left to the deployment.
    google_access_token: str = os.getenv("GOOGLE_ACCESS_TOKEN", "")
    google_request_timeout: int = int(os.getenv("GOOGLE_REQUEST_TIMEOUT", "15"))

    time_zone: str = os.getenv("TIME_ZONE", "Asia/Bangkok")
    guestbook_recent_limit: int = int(os.getenv("GUESTBOOK_RECENT_LIMIT", "50"))
    lock_timeout_seconds: float = float(os.getenv("LOCK_TIMEOUT_SECONDS", "30"))
    max_image_bytes: int = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))

    page_path: str = os.getenv("PAGE_PATH", "templates/index.html")
    page_title: str = os.getenv("PAGE_TITLE", "Memory of SWC 2568")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables
# should be set before importing this module.
settings = Settings()
