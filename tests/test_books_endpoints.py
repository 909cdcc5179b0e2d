import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from consolegame_api.app.api.deps import get_book_service
from consolegame_api.app.api.endpoints import books as books_router
from consolegame_api.app.core.errors import (
    ConflictError,
    InfrastructureError,
    InvalidInputError,
)
from consolegame_api.app.main import create_app

HARRY_POTTER = {
    "title": "Harry Potter à l'école des sorciers",
    "author": "J. K. Rowling",
    "year": "2001",
    "genre": "Fantasy",
}


@pytest.fixture
def client(database):
    return TestClient(create_app(database=database))


@pytest.fixture
def failing_service():
    service = MagicMock()
    service.get_all.return_value = []
    app = create_app(database=MagicMock())
    app.dependency_overrides[get_book_service] = lambda: service
    return TestClient(app), service


def test_root_redirects_to_books(client):
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code in (302, 307)
    assert resp.headers["location"] == "/books"


def test_list_books_renders_page(client):
    resp = client.get("/books")

    assert resp.status_code == 200
    assert "Gestion des Livres" in resp.text
    assert resp.context["books"] == []
    assert resp.context["error"] is None
    assert resp.context["success"] is None


def test_add_book_success(client):
    resp = client.post("/books/add", data=HARRY_POTTER)

    assert resp.status_code == 200
    assert resp.context["success"] == "Livre ajouté avec succès!"
    assert resp.context["error"] is None
    assert [b.title for b in resp.context["books"]] == [HARRY_POTTER["title"]]
    assert "J. K. Rowling" in resp.text


def test_add_book_duplicate_title(client):
    client.post("/books/add", data=HARRY_POTTER)

    resp = client.post(
        "/books/add",
        data={"title": HARRY_POTTER["title"], "author": "Copycat", "year": "2012"},
    )

    assert resp.context["error"] == books_router.DUPLICATE_TITLE_MESSAGE
    assert resp.context["success"] is None
    assert len(resp.context["books"]) == 1


def test_add_book_old_year_keeps_list(client):
    client.post("/books/add", data=HARRY_POTTER)

    resp = client.post("/books/add", data={"title": "Livre vieux", "author": "Auteur inconnu", "year": "1800"})

    assert resp.context["error"] == "L'année doit être supérieure à 1900"
    assert [b.title for b in resp.context["books"]] == [HARRY_POTTER["title"]]


def test_add_book_missing_fields(client):
    resp = client.post("/books/add", data={"title": "", "author": "X", "year": "2000"})
    assert resp.context["error"] == "Le titre est requis"


def test_add_many_success(client):
    payload = json.dumps(
        [
            {"title": "Livre A", "author": "Auteur", "year": 2001},
            {"title": "Livre B", "author": "Auteur", "year": "2002"},
        ]
    )

    resp = client.post("/books/add-many", data={"books": payload})

    assert resp.context["success"] == "2 livre(s) ajouté(s) avec succès!"
    assert len(resp.context["books"]) == 2


def test_add_many_invalid_json(client):
    resp = client.post("/books/add-many", data={"books": "[{title: oops"})

    assert resp.context["error"] == books_router.INVALID_JSON_MESSAGE
    assert resp.context["books"] == []


def test_add_many_rejects_whole_batch(client):
    payload = json.dumps(
        [
            {"title": "Livre A", "author": "Auteur", "year": 2001},
            {"title": "Livre B", "author": "", "year": 2002},
        ]
    )

    resp = client.post("/books/add-many", data={"books": payload})

    assert resp.context["error"] == "L'auteur est requis pour le livre à l'index 1"
    assert resp.context["books"] == []


def test_update_book(client, mongo_db):
    client.post("/books/add", data=HARRY_POTTER)
    book_id = str(mongo_db["books"].find_one()["_id"])

    resp = client.post(
        f"/books/update/{book_id}",
        data={"title": "Harry Potter 1", "author": "J. K. Rowling", "year": "1998", "genre": ""},
    )

    assert resp.context["success"] == "Livre mis à jour avec succès!"
    book = resp.context["books"][0]
    assert (book.title, book.year, book.genre) == ("Harry Potter 1", 1998, None)


def test_update_book_invalid_year(client, mongo_db):
    client.post("/books/add", data=HARRY_POTTER)
    book_id = str(mongo_db["books"].find_one()["_id"])

    resp = client.post(
        f"/books/update/{book_id}",
        data={"title": "Harry Potter 1", "author": "J. K. Rowling", "year": "quand"},
    )

    assert resp.context["error"] == "L'année doit être un nombre valide"
    assert resp.context["books"][0].year == 2001


def test_delete_book(client, mongo_db):
    client.post("/books/add", data=HARRY_POTTER)
    book_id = str(mongo_db["books"].find_one()["_id"])

    resp = client.post(f"/books/delete/{book_id}")

    assert resp.context["success"] == "Livre supprimé avec succès!"
    assert resp.context["books"] == []


def test_delete_book_malformed_id(client):
    resp = client.post("/books/delete/abc")
    assert resp.context["error"] == "Identifiant invalide : abc"


def test_delete_by_title(client):
    client.post("/books/add", data=HARRY_POTTER)

    resp = client.post("/books/delete-by-title", data={"title": f"  {HARRY_POTTER['title']}  "})

    assert resp.context["success"] == "Livre supprimé avec succès!"
    assert resp.context["books"] == []


def test_delete_by_title_not_found(client):
    resp = client.post("/books/delete-by-title", data={"title": "Inconnu"})

    assert resp.context["error"] == books_router.TITLE_NOT_FOUND_MESSAGE
    assert resp.context["success"] is None


def test_delete_by_title_blank(client):
    resp = client.post("/books/delete-by-title", data={"title": " "})
    assert resp.context["error"] == "Le titre est requis pour la suppression"


def test_delete_by_author(client):
    client.post(
        "/books/add-many",
        data={"books": json.dumps([
            {"title": "Un", "author": "Victor Hugo", "year": 1901},
            {"title": "Deux", "author": "Victor Hugo", "year": 1902},
            {"title": "Trois", "author": "Zola", "year": 1903},
        ])},
    )

    resp = client.post("/books/delete-by-author", data={"author": "Victor Hugo"})

    assert resp.context["success"] == "2 livre(s) supprimé(s) avec succès!"
    assert [b.title for b in resp.context["books"]] == ["Trois"]


def test_delete_by_author_not_found(client):
    resp = client.post("/books/delete-by-author", data={"author": "Personne"})
    assert resp.context["error"] == books_router.AUTHOR_NOT_FOUND_MESSAGE


def test_schema_rejection_shows_generic_message(failing_service):
    client, service = failing_service
    service.create.side_effect = InvalidInputError("Document failed validation")

    resp = client.post("/books/add", data=HARRY_POTTER)

    assert resp.context["error"] == books_router.VALIDATION_FAILED_MESSAGE


def test_conflict_on_update_shows_duplicate_message(failing_service):
    client, service = failing_service
    service.update.side_effect = ConflictError("E11000 duplicate key error")

    resp = client.post("/books/update/64b7f0c2a1b2c3d4e5f60718", data=HARRY_POTTER)

    assert resp.context["error"] == books_router.DUPLICATE_TITLE_MESSAGE


def test_infrastructure_error_passes_raw_message(failing_service):
    client, service = failing_service
    service.delete.side_effect = InfrastructureError("127.0.0.1:27017: connection refused")

    resp = client.post("/books/delete/64b7f0c2a1b2c3d4e5f60718")

    assert resp.context["error"] == "127.0.0.1:27017: connection refused"


def test_list_failure_renders_empty_list(failing_service):
    client, service = failing_service
    service.get_all.side_effect = InfrastructureError("Database not connected. Call connect() first.")

    resp = client.get("/books")

    assert resp.status_code == 200
    assert resp.context["books"] == []
    assert resp.context["error"] == "Database not connected. Call connect() first."


def test_list_failure_after_success_drops_success_banner(failing_service):
    client, service = failing_service
    service.get_all.side_effect = InfrastructureError("connection reset")

    resp = client.post("/books/add", data=HARRY_POTTER)

    assert resp.context["success"] is None
    assert resp.context["error"] == "connection reset"


def test_error_message_mapping():
    assert books_router.error_message(ConflictError("dup")) == books_router.DUPLICATE_TITLE_MESSAGE
    assert books_router.error_message(InvalidInputError("Document failed validation")) == (
        books_router.VALIDATION_FAILED_MESSAGE
    )
    assert books_router.error_message(InvalidInputError("Le titre est requis", field="title")) == "Le titre est requis"
    assert books_router.error_message(InfrastructureError("boom")) == "boom"


def test_add_book_huge_year_keeps_list(client):
    client.post("/books/add", data=HARRY_POTTER)

    resp = client.post("/books/add", data={"title": "Futur", "author": "A", "year": "100000000000000000000"})

    assert resp.status_code == 200
    assert resp.context["error"] == "L'année doit être un nombre valide"
    assert [b.title for b in resp.context["books"]] == [HARRY_POTTER["title"]]


def test_list_renders_legacy_document(client, mongo_db):
    mongo_db["books"].insert_one({"title": "Legacy", "author": "X"})

    resp = client.get("/books")

    assert resp.status_code == 200
    assert resp.context["error"] is None
    assert [b.title for b in resp.context["books"]] == ["Legacy"]
    assert "Legacy" in resp.text
