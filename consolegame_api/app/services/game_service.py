"""
Service layer for console games.

Games live in a collection imported from a video game sales dataset
and keep its column names as document keys.  Most operations are
read-only queries used by the JSON API; ``create``, ``update``,
``delete`` and ``get_by_id`` support administrative maintenance.

Every document returned has its ``_id`` converted to a string so the
result can be serialised to JSON directly.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.collection import Collection

from consolegame_api.app.core.db import MongoDatabase, to_object_id, translate_store_errors
from consolegame_api.app.schemas.game import GameInput

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100

SALES_FIELDS = ("NA_Sales", "EU_Sales", "JP_Sales", "Other_Sales", "Global_Sales")

TOP3_PROJECTION = {
    "Name": 1,
    "NA_Sales": 1,
    "EU_Sales": 1,
    "JP_Sales": 1,
    "Other_Sales": 1,
    "Global_Sales": 1,
    "Platform": 1,
    "Year": 1,
    "Genre": 1,
    "Publisher": 1,
    "_id": 1,
}

SUMMARY_PROJECTION = {"Name": 1, "Global_Sales": 1, "_id": 0}

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def to_sales_number(value: Any) -> float:
    """Coerce a sales figure to a number, defaulting to 0.

    Strings are parsed up to the first character that cannot belong to
    a number, so ``"1.5M"`` gives ``1.5``.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    match = _LEADING_FLOAT.match(str(value))
    if not match:
        return 0
    number = float(match.group(1))
    return number if math.isfinite(number) else 0


def _serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


class GameService:
    """Queries and maintenance operations on the game collection."""

    def __init__(self, database: MongoDatabase, collection_name: str = "consolegame") -> None:
        self._database = database
        self._collection_name = collection_name

    @property
    def collection(self) -> Collection:
        return self._database.get_database()[self._collection_name]

    def _find(self, query: Dict[str, Any], projection=None, sort=None, limit: int = 0) -> List[Dict[str, Any]]:
        with translate_store_errors():
            cursor = self.collection.find(query, projection)
            if sort:
                cursor = cursor.sort(sort)
            if limit:
                cursor = cursor.limit(limit)
            return [_serialize(doc) for doc in cursor]

    def get_all(self, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        """Return the ``limit`` most recently inserted games, newest first."""
        return self._find({}, sort=[("_id", DESCENDING)], limit=limit)

    def get_by_platform(self, platform: str) -> List[Dict[str, Any]]:
        return self._find({"Platform": platform})

    def get_by_platform_and_year(self, platform: str, year: str) -> List[Dict[str, Any]]:
        return self._find({"Platform": platform, "Year": year})

    def get_top3_by_platform_and_year(self, platform: str, year: str) -> List[Dict[str, Any]]:
        """Return the three best-selling games worldwide for a platform and year."""
        return self._find(
            {"Platform": platform, "Year": year},
            projection=TOP3_PROJECTION,
            sort=[("Global_Sales", DESCENDING)],
            limit=3,
        )

    def get_sales_summary(
        self, platform: str, year: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Return only names and global sales.

        With a ``limit`` the best sellers come first; without one the
        natural storage order is kept.
        """
        query: Dict[str, Any] = {"Platform": platform}
        if year is not None:
            query["Year"] = year
        sort = [("Global_Sales", DESCENDING)] if limit else None
        return self._find(query, projection=SUMMARY_PROJECTION, sort=sort, limit=limit or 0)

    def get_by_id(self, game_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(game_id)
        with translate_store_errors():
            doc = self.collection.find_one({"_id": oid})
        if doc is None:
            return None
        return _serialize(doc)

    @staticmethod
    def to_document(data: GameInput) -> Dict[str, Any]:
        doc = {
            "Name": data.name,
            "Platform": data.platform,
            "Year": str(data.year) if data.year is not None else None,
            "Genre": data.genre,
            "Publisher": data.publisher,
        }
        raw = data.model_dump(by_alias=True)
        for field in SALES_FIELDS:
            doc[field] = to_sales_number(raw.get(field))
        return doc

    def create(self, data: GameInput) -> str:
        doc = self.to_document(data)
        with translate_store_errors():
            result = self.collection.insert_one(doc)
        logger.info("Created game %s (%s)", result.inserted_id, data.name)
        return str(result.inserted_id)

    def update(self, game_id: str, data: GameInput) -> int:
        oid = to_object_id(game_id)
        with translate_store_errors():
            result = self.collection.update_one({"_id": oid}, {"$set": self.to_document(data)})
        if result.modified_count:
            logger.info("Updated game %s", game_id)
        return result.modified_count

    def delete(self, game_id: str) -> int:
        oid = to_object_id(game_id)
        with translate_store_errors():
            result = self.collection.delete_one({"_id": oid})
        if result.deleted_count:
            logger.info("Deleted game %s", game_id)
        return result.deleted_count
