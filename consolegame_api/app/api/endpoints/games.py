"""
JSON endpoints for console games.

Query routes answer with ``{"success": true, "count": n, "data": [...]}``
and turn any service failure into HTTP 500 with
``{"success": false, "error": message}``.  The administrative routes
under ``/games/by-id`` and ``POST /games`` use the same error envelope
but pick the status code from the error kind.

The ``/by-id`` routes are declared before the ``/{platform}/{year}``
routes so that they are matched first.
"""

import logging
from typing import Any, Callable, Dict, List

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from consolegame_api.app.api.deps import get_game_service
from consolegame_api.app.core.errors import ErrorKind, NotFoundError, ServiceError
from consolegame_api.app.schemas.game import (
    ErrorResponse,
    GameCreatedResponse,
    GameInput,
    GameListResponse,
    GameResponse,
    GameWriteResponse,
)
from consolegame_api.app.services.game_service import GameService

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {500: {"model": ErrorResponse}}
ADMIN_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INFRASTRUCTURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(exc: ServiceError, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": exc.message})


def list_response(query: Callable[[], List[Dict[str, Any]]], description: str):
    try:
        games = query()
    except ServiceError as exc:
        logger.error("Failed to fetch %s: %s", description, exc)
        return error_response(exc)
    return {"success": True, "count": len(games), "data": games}


@router.get("", response_model=GameListResponse, responses=ERROR_RESPONSES)
def list_games(service: GameService = Depends(get_game_service)):
    return list_response(service.get_all, "games")


@router.post(
    "",
    response_model=GameCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ADMIN_ERROR_RESPONSES,
)
def create_game(game_in: GameInput, service: GameService = Depends(get_game_service)):
    try:
        game_id = service.create(game_in)
    except ServiceError as exc:
        logger.error("Failed to create game: %s", exc)
        return error_response(exc, _STATUS_BY_KIND[exc.kind])
    return {"success": True, "id": game_id}


@router.get("/by-id/{game_id}", response_model=GameResponse, responses=ADMIN_ERROR_RESPONSES)
def get_game(game_id: str, service: GameService = Depends(get_game_service)):
    try:
        game = service.get_by_id(game_id)
        if game is None:
            raise NotFoundError(f"Game {game_id} not found")
    except ServiceError as exc:
        logger.error("Failed to fetch game %s: %s", game_id, exc)
        return error_response(exc, _STATUS_BY_KIND[exc.kind])
    return {"success": True, "data": game}


@router.put(
    "/by-id/{game_id}",
    response_model=GameWriteResponse,
    response_model_exclude_none=True,
    responses=ADMIN_ERROR_RESPONSES,
)
def update_game(game_id: str, game_in: GameInput, service: GameService = Depends(get_game_service)):
    try:
        modified = service.update(game_id, game_in)
    except ServiceError as exc:
        logger.error("Failed to update game %s: %s", game_id, exc)
        return error_response(exc, _STATUS_BY_KIND[exc.kind])
    return {"success": True, "modified": modified}


@router.delete(
    "/by-id/{game_id}",
    response_model=GameWriteResponse,
    response_model_exclude_none=True,
    responses=ADMIN_ERROR_RESPONSES,
)
def delete_game(game_id: str, service: GameService = Depends(get_game_service)):
    try:
        deleted = service.delete(game_id)
    except ServiceError as exc:
        logger.error("Failed to delete game %s: %s", game_id, exc)
        return error_response(exc, _STATUS_BY_KIND[exc.kind])
    return {"success": True, "deleted": deleted}


@router.get("/{platform}", response_model=GameListResponse, responses=ERROR_RESPONSES)
def list_games_by_platform(platform: str, service: GameService = Depends(get_game_service)):
    return list_response(lambda: service.get_by_platform(platform), f"games for {platform}")


@router.get("/{platform}/{year}", response_model=GameListResponse, responses=ERROR_RESPONSES)
def list_games_by_platform_and_year(
    platform: str, year: str, service: GameService = Depends(get_game_service)
):
    return list_response(
        lambda: service.get_by_platform_and_year(platform, year),
        f"games for {platform} in {year}",
    )


@router.get("/{platform}/{year}/top3", response_model=GameListResponse, responses=ERROR_RESPONSES)
def top3_games(platform: str, year: str, service: GameService = Depends(get_game_service)):
    return list_response(
        lambda: service.get_top3_by_platform_and_year(platform, year),
        f"top 3 games for {platform} in {year}",
    )
