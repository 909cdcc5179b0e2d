"""
HTML endpoints for the book library.

Every route renders the same page: the full list of books, the forms,
and a banner holding either an error or a success message.  The list
is fetched again after each operation, whether it succeeded or not, so
the page never loses the table because of a failed form submission.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from consolegame_api.app.api.deps import get_book_service
from consolegame_api.app.core.errors import ErrorKind, ServiceError
from consolegame_api.app.schemas.book import BookRead
from consolegame_api.app.services.book_service import BookService

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[2] / "templates"))

DUPLICATE_TITLE_MESSAGE = "Un livre avec ce titre existe déjà."
VALIDATION_FAILED_MESSAGE = (
    "Validation échouée: Vérifiez que tous les champs requis sont remplis correctement (année > 1900)."
)
INVALID_JSON_MESSAGE = "Format JSON invalide. Vérifiez la syntaxe."
TITLE_NOT_FOUND_MESSAGE = "Aucun livre trouvé avec ce titre"
AUTHOR_NOT_FOUND_MESSAGE = "Aucun livre trouvé pour cet auteur"


def error_message(exc: ServiceError) -> str:
    """Return the message shown to the user for a service error."""
    if exc.kind is ErrorKind.CONFLICT:
        return DUPLICATE_TITLE_MESSAGE
    # Field-level problems already carry a precise message; a document
    # refused by the collection validator does not.
    if exc.kind is ErrorKind.VALIDATION and exc.field is None:
        return VALIDATION_FAILED_MESSAGE
    return exc.message


def render_page(
    request: Request,
    service: BookService,
    error: Optional[str] = None,
    success: Optional[str] = None,
) -> HTMLResponse:
    books: List[BookRead] = []
    try:
        books = service.get_all()
    except ServiceError as exc:
        logger.error("Failed to list books: %s", exc)
        error = error or exc.message
        success = None
    return templates.TemplateResponse(
        request, "index.html", {"books": books, "error": error, "success": success}
    )


@router.get("", response_class=HTMLResponse)
def list_books(request: Request, service: BookService = Depends(get_book_service)) -> HTMLResponse:
    return render_page(request, service)


@router.post("/add", response_class=HTMLResponse)
def add_book(
    request: Request,
    title: str = Form(""),
    author: str = Form(""),
    year: str = Form(""),
    genre: str = Form(""),
    service: BookService = Depends(get_book_service),
) -> HTMLResponse:
    try:
        service.create({"title": title, "author": author, "year": year, "genre": genre})
    except ServiceError as exc:
        logger.error("Failed to add book: %s", exc)
        return render_page(request, service, error=error_message(exc))
    return render_page(request, service, success="Livre ajouté avec succès!")


@router.post("/add-many", response_class=HTMLResponse)
def add_many_books(
    request: Request,
    books: str = Form(""),
    service: BookService = Depends(get_book_service),
) -> HTMLResponse:
    try:
        items = json.loads(books)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON submitted for bulk add: %s", exc)
        return render_page(request, service, error=INVALID_JSON_MESSAGE)

    try:
        inserted = service.create_many(items)
    except ServiceError as exc:
        logger.error("Failed to add books: %s", exc)
        return render_page(request, service, error=error_message(exc))
    return render_page(request, service, success=f"{inserted} livre(s) ajouté(s) avec succès!")


@router.post("/update/{book_id}", response_class=HTMLResponse)
def update_book(
    request: Request,
    book_id: str,
    title: str = Form(""),
    author: str = Form(""),
    year: str = Form(""),
    genre: str = Form(""),
    service: BookService = Depends(get_book_service),
) -> HTMLResponse:
    try:
        service.update(book_id, {"title": title, "author": author, "year": year, "genre": genre})
    except ServiceError as exc:
        logger.error("Failed to update book %s: %s", book_id, exc)
        return render_page(request, service, error=error_message(exc))
    return render_page(request, service, success="Livre mis à jour avec succès!")


@router.post("/delete/{book_id}", response_class=HTMLResponse)
def delete_book(
    request: Request,
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> HTMLResponse:
    try:
        service.delete(book_id)
    except ServiceError as exc:
        logger.error("Failed to delete book %s: %s", book_id, exc)
        return render_page(request, service, error=error_message(exc))
    return render_page(request, service, success="Livre supprimé avec succès!")


@router.post("/delete-by-title", response_class=HTMLResponse)
def delete_book_by_title(
    request: Request,
    title: str = Form(""),
    service: BookService = Depends(get_book_service),
) -> HTMLResponse:
    try:
        deleted = service.delete_by_title(title)
    except ServiceError as exc:
        logger.error("Failed to delete book by title: %s", exc)
        return render_page(request, service, error=error_message(exc))
    if deleted == 0:
        return render_page(request, service, error=TITLE_NOT_FOUND_MESSAGE)
    return render_page(request, service, success="Livre supprimé avec succès!")


@router.post("/delete-by-author", response_class=HTMLResponse)
def delete_books_by_author(
    request: Request,
    author: str = Form(""),
    service: BookService = Depends(get_book_service),
) -> HTMLResponse:
    try:
        deleted = service.delete_by_author(author)
    except ServiceError as exc:
        logger.error("Failed to delete books by author: %s", exc)
        return render_page(request, service, error=error_message(exc))
    if deleted == 0:
        return render_page(request, service, error=AUTHOR_NOT_FOUND_MESSAGE)
    return render_page(request, service, success=f"{deleted} livre(s) supprimé(s) avec succès!")
