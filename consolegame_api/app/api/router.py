"""
Top-level router of the application.

Aggregates the domain routers under their prefixes.  Books are served
as HTML pages, games as JSON.
"""

from fastapi import APIRouter

from .endpoints import books, games

router = APIRouter()

router.include_router(books.router, prefix="/books", tags=["books"])
router.include_router(games.router, prefix="/games", tags=["games"])
