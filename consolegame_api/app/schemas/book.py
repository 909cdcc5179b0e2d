"""
Pydantic schemas for books.

``Book`` is a validated book ready to be stored; ``BookRead`` is what
the service hands back to the HTML layer.  Genre is optional on both:
it is ``None`` when the user left it blank and is then left out of the
stored document entirely.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Book(BaseModel):
    """A validated book."""

    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    year: int = Field(..., gt=1900, lt=2 ** 31)
    genre: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        """Return the MongoDB document for this book, without a blank genre."""
        return self.model_dump(exclude_none=True)


class BookRead(BaseModel):
    """Schema for reading a stored book.

    Documents written before the collection carried its validator may
    lack fields; those are read as blank.
    """

    id: str
    title: str = ""
    author: str = ""
    year: Optional[int] = None
    genre: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "BookRead":
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title") or "",
            author=doc.get("author") or "",
            year=doc.get("year"),
            genre=doc.get("genre"),
        )
