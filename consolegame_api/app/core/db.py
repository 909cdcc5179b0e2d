"""
MongoDB integration.

This module provides ``MongoDatabase``, the persistence handle shared
by the services.  The application creates one handle, connects it on
startup and passes it to every service it builds; nothing here is a
module-level singleton.  On first connect the handle makes sure the
book collection exists with its schema validator and a unique index on
``title``.

``translate_store_errors`` converts driver exceptions raised inside
service calls into the tagged errors of ``core.errors``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

from bson import ObjectId
from bson.errors import BSONError, InvalidId
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import (
    BulkWriteError,
    DuplicateKeyError,
    OperationFailure,
    PyMongoError,
    WriteError,
)

from .config import settings
from .errors import ConflictError, InfrastructureError, InvalidInputError, NotConnectedError

logger = logging.getLogger(__name__)

DUPLICATE_KEY = 11000
DOCUMENT_VALIDATION_FAILURE = 121
INDEX_ALREADY_EXISTS_CODES = {85, 86}

BOOK_SCHEMA_VALIDATOR: Dict[str, Any] = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["title", "author", "year"],
        "properties": {
            "title": {
                "bsonType": "string",
                "description": "title must be a string and is required",
            },
            "author": {
                "bsonType": "string",
                "minLength": 1,
                "description": "author must be a non-empty string and is required",
            },
            "year": {
                "bsonType": "int",
                "minimum": 1901,
                "description": "year must be an integer greater than 1900 and is required",
            },
            "genre": {
                "bsonType": "string",
                "description": "genre is optional but must be a string when present",
            },
        },
    }
}


class MongoDatabase:
    """Lazily connected handle on a MongoDB database.

    ``client_factory`` is called with the connection URL and client
    options; it defaults to :class:`pymongo.MongoClient`.
    """

    def __init__(
        self,
        url: str,
        name: str,
        books_collection: str = "books",
        server_selection_timeout_ms: int = 5000,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ) -> None:
        self.url = url
        self.name = name
        self.books_collection = books_collection
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = None

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    def connect(self) -> Database:
        """Open the connection and initialise the book collection.

        Calling ``connect`` on a connected handle returns the existing
        database.  If the server cannot be reached or initialisation
        fails, the client is closed again and the error propagates.
        """
        if self._db is not None:
            return self._db

        client = self._client_factory(
            self.url,
            directConnection=True,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
        )
        try:
            client.admin.command("ping")
            db = client[self.name]
            self._init_books_collection(db)
        except Exception:
            client.close()
            raise

        self._client = client
        self._db = db
        logger.info("Connected to MongoDB database %s", self.name)
        return db

    def disconnect(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None
        self._db = None
        logger.info("Disconnected from MongoDB")

    def get_database(self) -> Database:
        if self._db is None:
            raise NotConnectedError("Database not connected. Call connect() first.")
        return self._db

    def _init_books_collection(self, db: Database) -> None:
        name = self.books_collection
        if not db.list_collection_names(filter={"name": name}):
            collection = db.create_collection(name, validator=BOOK_SCHEMA_VALIDATOR)
            collection.create_index("title", unique=True)
            logger.info("Created collection %s with schema validator", name)
            return

        try:
            db[name].create_index("title", unique=True)
        except OperationFailure as exc:
            if isinstance(exc, DuplicateKeyError) or exc.code == DUPLICATE_KEY:
                logger.warning(
                    "Cannot create unique index on title in %s because duplicate values exist. "
                    "Please clean the collection.",
                    name,
                )
            elif exc.code in INDEX_ALREADY_EXISTS_CODES or "already exists" in str(exc):
                logger.debug("Unique index on %s.title already exists", name)
            else:
                raise


def to_object_id(value: Any) -> ObjectId:
    """Parse a document identifier taken from a URL or form."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise InvalidInputError(f"Identifiant invalide : {value}", field="id") from exc


def _bulk_error_codes(exc: BulkWriteError) -> set:
    details = exc.details or {}
    return {err.get("code") for err in details.get("writeErrors", [])}


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Re-raise driver errors as tagged service errors."""
    try:
        yield
    except DuplicateKeyError as exc:
        raise ConflictError(str(exc)) from exc
    except BulkWriteError as exc:
        codes = _bulk_error_codes(exc)
        if DUPLICATE_KEY in codes:
            raise ConflictError(str(exc)) from exc
        if DOCUMENT_VALIDATION_FAILURE in codes:
            raise InvalidInputError(str(exc)) from exc
        raise InfrastructureError(str(exc)) from exc
    except WriteError as exc:
        if exc.code == DOCUMENT_VALIDATION_FAILURE:
            raise InvalidInputError(str(exc)) from exc
        raise InfrastructureError(str(exc)) from exc
    except PyMongoError as exc:
        raise InfrastructureError(str(exc)) from exc
    except (BSONError, OverflowError) as exc:
        # bson could not encode or decode a document
        raise InfrastructureError(str(exc)) from exc


def create_database() -> MongoDatabase:
    """Build the database handle described by ``settings``."""
    return MongoDatabase(
        settings.mongo_url,
        settings.mongo_db_name,
        books_collection=settings.books_collection,
        server_selection_timeout_ms=settings.mongo_server_selection_timeout_ms,
    )
