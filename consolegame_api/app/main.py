"""
Main entrypoint for the console game library.

This module assembles the FastAPI application, sets up logging and
includes the routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``.  Run it with uvicorn or another ASGI server, e.g.::

    uvicorn consolegame_api.app.main:app --reload

The MongoDB handle is created here and stored on ``app.state``; it is
connected when the application starts and closed when it stops.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from .api.router import router
from .core.config import settings
from .core.db import MongoDatabase, create_database
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(database: Optional[MongoDatabase] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    database : Optional[MongoDatabase]
        Handle used by every service.  A handle built from ``settings``
        is used when omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.database = database if database is not None else create_database()

    app.include_router(router)

    @app.get("/", include_in_schema=False)
    def root() -> RedirectResponse:
        return RedirectResponse(url="/books")

    @app.on_event("startup")
    def startup_event() -> None:
        app.state.database.connect()

    @app.on_event("shutdown")
    def shutdown_event() -> None:
        logger.info("Shutting down")
        app.state.database.disconnect()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
