# backend/tennisplan/routes/v1/players.py
"""
Player routes - API v1

Endpoints:
    GET /?search=          → List players, optionally filtered
    POST /                 → Create player
    GET /{player_id}       → Get player
    PATCH /{player_id}     → Update player
    DELETE /{player_id}    → Delete player (removes them from their sessions)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from ...api.dependencies.services import get_player_service
from ...core.exceptions import DomainException
from ...schemas.player import PlayerCreate, PlayerListResponse, PlayerResponse, PlayerUpdate
from ...services.player_service import PlayerService
from ..utils import ULID_PATH_PATTERN, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["players-v1"])


@router.get("", response_model=PlayerListResponse)
def list_players(
    search: Optional[str] = Query(None, max_length=200, description="Matches name, email, phone and address"),
    service: PlayerService = Depends(get_player_service),
) -> PlayerListResponse:
    players = service.list_players(search)
    return PlayerListResponse(items=[PlayerResponse.model_validate(p) for p in players], total=len(players))


@router.post("", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
def create_player(
    payload: PlayerCreate,
    service: PlayerService = Depends(get_player_service),
) -> PlayerResponse:
    try:
        return PlayerResponse.model_validate(service.create_player(payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{player_id}", response_model=PlayerResponse)
def get_player(
    player_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: PlayerService = Depends(get_player_service),
) -> PlayerResponse:
    try:
        return PlayerResponse.model_validate(service.get_player(player_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{player_id}", response_model=PlayerResponse)
def update_player(
    payload: PlayerUpdate,
    player_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: PlayerService = Depends(get_player_service),
) -> PlayerResponse:
    try:
        return PlayerResponse.model_validate(service.update_player(player_id, payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_player(
    player_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: PlayerService = Depends(get_player_service),
) -> Response:
    try:
        service.delete_player(player_id)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
