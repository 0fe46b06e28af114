from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile
from pydantic import BaseModel

from league.core.security import get_current_admin
from league.models import PlayerModel, PlayerStatus, TournamentConfig
from league.routes.dependencies import get_player_service
from league.routes.tournament_routes import get_existing_tournament
from league.services.player_service import PlayerService

router = APIRouter()


class NameAvailability(BaseModel):
    display_name: str
    available: bool


@router.post("/tournaments/{tournament_id}/players", response_model=PlayerModel, status_code=201, summary="Register Player")
async def register_player(
    tournament: TournamentConfig = Depends(get_existing_tournament),
    display_name: str = Form(..., description="In-game name, unique within the tournament"),
    real_name: str = Form(...),
    avatar: UploadFile = File(..., description="Profile picture"),
    service: PlayerService = Depends(get_player_service),
):
    """
    Registers a player for the tournament. The player stays `pending` until an admin approves them.
    """
    content = await avatar.read()
    return await service.register(
        tournament.id,
        display_name=display_name,
        real_name=real_name,
        avatar=content,
        avatar_filename=avatar.filename or "avatar.png",
    )


@router.get("/tournaments/{tournament_id}/players", response_model=List[PlayerModel], summary="List Players")
async def list_players(
    tournament: TournamentConfig = Depends(get_existing_tournament),
    status: Optional[PlayerStatus] = Query(None, description="Only players with this status"),
    service: PlayerService = Depends(get_player_service),
):
    return service.list_players(tournament.id, status=status)


@router.get("/tournaments/{tournament_id}/players/name-available", response_model=NameAvailability, summary="Check Display Name")
async def check_name(
    display_name: str = Query(..., min_length=1),
    tournament: TournamentConfig = Depends(get_existing_tournament),
    service: PlayerService = Depends(get_player_service),
):
    return NameAvailability(display_name=display_name, available=not service.is_name_taken(tournament.id, display_name))


@router.post("/players/{player_id}/approve", response_model=PlayerModel, summary="Approve Player (Admin Only)")
async def approve_player(
    player_id: str = Path(..., description="The ID of the player"),
    admin: str = Depends(get_current_admin),
    service: PlayerService = Depends(get_player_service),
):
    return service.approve_player(player_id)
