"""
Service layer for books.

Books are stored in their own MongoDB collection, which carries a
schema validator and a unique index on ``title`` (see ``core.db``).
Input arrives as loosely typed mappings, either from an HTML form or
from a decoded JSON array, so every create and update goes through the
same validation: title and author must be non-blank once trimmed, and
year must start with an integer greater than 1900.

Validation failures raise ``InvalidInputError`` with a French message
meant to be shown to the user as is.  Duplicate titles surface as
``ConflictError`` and other store failures as ``InfrastructureError``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError
from pymongo.collection import Collection

from consolegame_api.app.core.db import MongoDatabase, to_object_id, translate_store_errors
from consolegame_api.app.core.errors import InvalidInputError
from consolegame_api.app.schemas.book import Book, BookRead

logger = logging.getLogger(__name__)

MIN_YEAR_EXCLUSIVE = 1900
# The collection validator stores year as a 32-bit BSON int.
MAX_YEAR = 2 ** 31 - 1

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_year(value: Any) -> Optional[int]:
    """Parse the leading integer of ``value``, as HTML form input allows "2001 " or "2001.0"."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(_clean(value))
    if not match:
        return None
    return int(match.group(1))


class BookService:
    """Validation and CRUD operations on the book collection."""

    def __init__(self, database: MongoDatabase, collection_name: str = "books") -> None:
        self._database = database
        self._collection_name = collection_name

    @property
    def collection(self) -> Collection:
        return self._database.get_database()[self._collection_name]

    @staticmethod
    def validate(data: Mapping[str, Any], index: Optional[int] = None) -> Book:
        """Validate raw input and return a ``Book``.

        When ``index`` is given the messages name the position of the
        book inside a batch.
        """
        suffix = f" pour le livre à l'index {index}" if index is not None else ""

        title = _clean(data.get("title"))
        if not title:
            raise InvalidInputError(f"Le titre est requis{suffix}", field="title")

        author = _clean(data.get("author"))
        if not author:
            if index is None:
                raise InvalidInputError("L'auteur est requis et ne peut pas être vide", field="author")
            raise InvalidInputError(f"L'auteur est requis{suffix}", field="author")

        year = _parse_year(data.get("year"))
        if year is None or year > MAX_YEAR:
            raise InvalidInputError(f"L'année doit être un nombre valide{suffix}", field="year")
        if year <= MIN_YEAR_EXCLUSIVE:
            raise InvalidInputError(f"L'année doit être supérieure à 1900{suffix}", field="year")

        genre = _clean(data.get("genre")) or None
        return Book(title=title, author=author, year=year, genre=genre)

    def get_all(self) -> List[BookRead]:
        with translate_store_errors():
            docs = list(self.collection.find())
        books = []
        for doc in docs:
            try:
                books.append(BookRead.from_document(doc))
            except ValidationError:
                logger.warning("Skipping malformed book document %s", doc.get("_id"))
        return books

    def get_by_id(self, book_id: str) -> Optional[BookRead]:
        oid = to_object_id(book_id)
        with translate_store_errors():
            doc = self.collection.find_one({"_id": oid})
        if doc is None:
            return None
        return BookRead.from_document(doc)

    def create(self, data: Mapping[str, Any]) -> str:
        """Insert one book and return its identifier."""
        book = self.validate(data)
        with translate_store_errors():
            result = self.collection.insert_one(book.to_document())
        logger.info("Created book %s (%s)", result.inserted_id, book.title)
        return str(result.inserted_id)

    def create_many(self, items: Any) -> int:
        """Insert a batch of books and return how many were inserted.

        The whole batch is validated before anything is written, so a
        single invalid entry leaves the collection untouched.
        """
        if not isinstance(items, list) or not items:
            raise InvalidInputError("Un tableau de livres non vide est requis", field="books")

        books = []
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                raise InvalidInputError(f"Le livre à l'index {index} doit être un objet", field="books")
            books.append(self.validate(item, index=index))

        with translate_store_errors():
            result = self.collection.insert_many([book.to_document() for book in books])
        inserted = len(result.inserted_ids)
        logger.info("Created %d books", inserted)
        return inserted

    def update(self, book_id: str, data: Mapping[str, Any]) -> int:
        """Replace the fields of a book.  Returns the modified count.

        A blank genre removes any genre stored previously.
        """
        book = self.validate(data)
        oid = to_object_id(book_id)
        changes: dict = {"$set": book.to_document()}
        if book.genre is None:
            changes["$unset"] = {"genre": ""}
        with translate_store_errors():
            result = self.collection.update_one({"_id": oid}, changes)
        if result.modified_count:
            logger.info("Updated book %s", book_id)
        return result.modified_count

    def delete(self, book_id: str) -> int:
        oid = to_object_id(book_id)
        with translate_store_errors():
            result = self.collection.delete_one({"_id": oid})
        if result.deleted_count:
            logger.info("Deleted book %s", book_id)
        return result.deleted_count

    def delete_by_title(self, title: Any) -> int:
        """Delete the book with this exact title.  Returns 0 when none matched."""
        title = _clean(title)
        if not title:
            raise InvalidInputError("Le titre est requis pour la suppression", field="title")
        with translate_store_errors():
            result = self.collection.delete_one({"title": title})
        logger.info("Deleted %d book(s) titled %r", result.deleted_count, title)
        return result.deleted_count

    def delete_by_author(self, author: Any) -> int:
        """Delete every book by this exact author.  Returns 0 when none matched."""
        author = _clean(author)
        if not author:
            raise InvalidInputError("L'auteur est requis pour la suppression", field="author")
        with translate_store_errors():
            result = self.collection.delete_many({"author": author})
        logger.info("Deleted %d book(s) by %r", result.deleted_count, author)
        return result.deleted_count
