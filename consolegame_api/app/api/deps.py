"""
FastAPI dependencies shared by the routers.

The database handle lives on ``app.state`` and services are built per
request around it.  Tests replace ``get_book_service`` or
``get_game_service`` through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from consolegame_api.app.core.config import settings
from consolegame_api.app.core.db import MongoDatabase
from consolegame_api.app.services.book_service import BookService
from consolegame_api.app.services.game_service import GameService


def get_database(request: Request) -> MongoDatabase:
    return request.app.state.database


def get_book_service(database: MongoDatabase = Depends(get_database)) -> BookService:
    return BookService(database, settings.books_collection)


def get_game_service(database: MongoDatabase = Depends(get_database)) -> GameService:
    return GameService(database, settings.games_collection)
