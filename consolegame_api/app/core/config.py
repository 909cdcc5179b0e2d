"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields and
match a local MongoDB instance listening on the standard port.  In a
production deployment you should override these via environment
variables.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Console Game Library")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Connection string and database name for MongoDB.  The server
    # selection timeout bounds how long a request waits when the store
    # is unreachable; there are no retries on top of it.
    mongo_url: str = os.getenv("MONGO_URL", "mongodb://127.0.0.1:27017")
    mongo_db_name: str = os.getenv("MONGO_DB_NAME", "consolegame")
    mongo_server_selection_timeout_ms: int = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))

    books_collection: str = os.getenv("BOOKS_COLLECTION", "books")
    games_collection: str = os.getenv("GAMES_COLLECTION", "consolegame")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
