"""
Main entrypoint for the memorial website backend.

This module assembles the FastAPI application, sets up logging, wires
the record store, blob store and services together and includes the
routers.  ``create_app`` builds and configures the app, which is then
instantiated at module import time as ``app`` so it can be served
with uvicorn::

    uvicorn memorial_api.app.main:app --reload

Tests call ``create_app`` directly with their own settings and stores.
"""

from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .api import pages
from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.gate import WriteGate
from .core.logging_config import setup_logging
from .services.guestbook_service import GuestbookService
from .services.student_service import StudentService
from .stores import BlobStore, LocalBlobStore, RecordStore, build_blob_store, build_record_store
from .stores.local_blob import MEDIA_URL_PREFIX


def create_app(
    app_settings: Optional[Settings] = None,
    record_store: Optional[RecordStore] = None,
    blob_store: Optional[BlobStore] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Configuration to use; defaults to the module-level ``settings``.
    record_store, blob_store : optional
        Pre-built stores.  When omitted they are chosen from the
        settings' backend names.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    # Initialise logging before anything else so that the store
    # constructors below can log.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    record_store = record_store or build_record_store(app_settings)
    blob_store = blob_store or build_blob_store(app_settings)
    gate = WriteGate(app_settings.lock_timeout_seconds)

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version)
    app.state.settings = app_settings
    app.state.record_store = record_store
    app.state.guestbook_service = GuestbookService(app_settings, record_store, blob_store, gate)
    app.state.student_service = StudentService(app_settings, record_store)

    app.include_router(pages.router)
    app.include_router(v1_router, prefix="/api/v1")
    if isinstance(blob_store, LocalBlobStore):
        app.mount(
            MEDIA_URL_PREFIX,
            StaticFiles(directory=str(blob_store.media_dir), check_dir=False),
            name="media",
        )

    @app.on_event("startup")
    def startup_event() -> None:
        # Creates the SQLite file (applying migrations) and the media
        # directory; a no-op for the Google backends.
        record_store.initialize()
        blob_store.initialize()

    @app.get("/healthz", include_in_schema=False)
    def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
