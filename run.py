"""Entry point for the memorial website backend.

Starts the FastAPI application with Uvicorn.  Configuration (store
backends, spreadsheet ID, media directory, ...) is read from
environment variables; see ``memorial_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from memorial_api.app.core.config import settings
from memorial_api.app.main import app


async def main() -> None:
    """Serve the application until interrupted.

    Host and port come from the ``HOST`` and ``PORT`` environment
    variables (defaults ``0.0.0.0`` and ``8000``).
    """
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Serving %s on %s:%s", settings.project_name, settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
