"""Entry point for the console game library web application.

This script serves the FastAPI application with Uvicorn.  It is
intended to be executed from the project root, for example under
Docker, where you only specify a single Python file to run.

Configuration such as the MongoDB URL, database name, host and port is
read from environment variables (see ``consolegame_api.app.core.config``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from consolegame_api.app.core.config import settings
from consolegame_api.app.main import app


async def main() -> None:
    """Serve the application until interrupted.

    The database connection is opened and closed by the application's
    startup and shutdown events, which Uvicorn triggers on SIGINT and
    SIGTERM.
    """
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level="info")
    server = Server(config)
    logging.getLogger(__name__).info("Serving on http://%s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
