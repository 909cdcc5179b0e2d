import sys
from pathlib import Path

import mongomock
import pytest

# Ensure the project root is on sys.path so ``query_games`` imports in direct pytest runs
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from consolegame_api.app.services.book_service import BookService  # noqa: E402
from consolegame_api.app.services.game_service import GameService  # noqa: E402


class InMemoryDatabase:
    """Stands in for ``MongoDatabase`` around a mongomock database."""

    def __init__(self, db):
        self._db = db
        self.connected = False

    def connect(self):
        self.connected = True
        return self._db

    def disconnect(self):
        self.connected = False

    def get_database(self):
        return self._db


@pytest.fixture
def mongo_db():
    db = mongomock.MongoClient()["consolegame"]
    db["books"].create_index("title", unique=True)
    return db


@pytest.fixture
def database(mongo_db):
    return InMemoryDatabase(mongo_db)


@pytest.fixture
def book_service(database):
    return BookService(database, "books")


@pytest.fixture
def game_service(database):
    return GameService(database, "consolegame")


@pytest.fixture
def sample_games(mongo_db):
    games = [
        {"Name": "Mario Kart 7", "Platform": "3DS", "Year": "2011", "Genre": "Racing",
         "Publisher": "Nintendo", "NA_Sales": 5.03, "EU_Sales": 4.02, "JP_Sales": 2.69,
         "Other_Sales": 0.91, "Global_Sales": 12.65},
        {"Name": "Super Mario 3D Land", "Platform": "3DS", "Year": "2011", "Genre": "Platform",
         "Publisher": "Nintendo", "NA_Sales": 4.89, "EU_Sales": 3.0, "JP_Sales": 2.14,
         "Other_Sales": 0.78, "Global_Sales": 10.81},
        {"Name": "Nintendogs + cats", "Platform": "3DS", "Year": "2011", "Genre": "Simulation",
         "Publisher": "Nintendo", "NA_Sales": 2.49, "EU_Sales": 2.31, "JP_Sales": 0.43,
         "Other_Sales": 0.4, "Global_Sales": 5.63},
        {"Name": "Pilotwings Resort", "Platform": "3DS", "Year": "2011", "Genre": "Simulation",
         "Publisher": "Nintendo", "NA_Sales": 0.62, "EU_Sales": 0.66, "JP_Sales": 0.29,
         "Other_Sales": 0.12, "Global_Sales": 1.69},
        {"Name": "Pokemon X/Pokemon Y", "Platform": "3DS", "Year": "2013", "Genre": "Role-Playing",
         "Publisher": "Nintendo", "NA_Sales": 5.17, "EU_Sales": 4.05, "JP_Sales": 4.34,
         "Other_Sales": 0.79, "Global_Sales": 14.35},
        {"Name": "Wii Sports", "Platform": "Wii", "Year": "2006", "Genre": "Sports",
         "Publisher": "Nintendo", "NA_Sales": 41.49, "EU_Sales": 29.02, "JP_Sales": 3.77,
         "Other_Sales": 8.46, "Global_Sales": 82.74},
    ]
    for game in games:
        mongo_db["consolegame"].insert_one(dict(game))
    return games
