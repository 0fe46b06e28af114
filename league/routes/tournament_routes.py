from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from league.core.config import settings
from league.core.security import get_current_admin
from league.models import (
    DrawResult,
    GroupStandings,
    KnockoutRound,
    MatchModel,
    ProgressionSystem,
    TournamentConfig,
    TournamentProgress,
)
from league.routes.dependencies import get_progression_service, get_tournament_service
from league.services.progression_service import ProgressionService
from league.services.tournament_service import TournamentService

router = APIRouter()


class TournamentCreationRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=100, description="Name of the tournament")
    capacity: int = Field(default_factory=lambda: settings.DEFAULT_CAPACITY, ge=2, description="Approved players needed for the draw")
    group_size: int = Field(default_factory=lambda: settings.DEFAULT_GROUP_SIZE, ge=2)
    qualifiers_per_group: int = Field(default_factory=lambda: settings.QUALIFIERS_PER_GROUP, ge=1)
    progression_system: ProgressionSystem = ProgressionSystem.ROUND_ROBIN_KNOCKOUT


def get_existing_tournament(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service),
) -> TournamentConfig:
    tournament = service.get_tournament_by_id(tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return tournament


@router.post("", response_model=TournamentConfig, status_code=201, summary="Create New Tournament")
async def create_tournament(
    tournament_data: TournamentCreationRequest,
    admin: str = Depends(get_current_admin),
    service: TournamentService = Depends(get_tournament_service),
):
    """
    Creates a tournament open for registration.

    - **capacity**: number of approved players the draw waits for.
    - **group_size**: players per round-robin group.
    - **qualifiers_per_group**: how many of each group reach the knockout stage.
    - **progression_system**: `round_robin+knockout` or `knockout_only`.
    """
    try:
        tournament_config = TournamentConfig(**tournament_data.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return service.create_tournament(tournament_config)


@router.get("", response_model=List[TournamentConfig], summary="List Tournaments")
async def list_tournaments(service: TournamentService = Depends(get_tournament_service)):
    return service.get_all_tournaments()


@router.get("/{tournament_id}", response_model=TournamentConfig, summary="Get Tournament Details")
async def get_tournament(tournament: TournamentConfig = Depends(get_existing_tournament)):
    return tournament


@router.get("/{tournament_id}/progress", response_model=TournamentProgress, summary="Tournament Lifecycle Progress")
async def get_progress(
    tournament: TournamentConfig = Depends(get_existing_tournament),
    service: ProgressionService = Depends(get_progression_service),
):
    """Current status plus whether the knockout stage can be seeded."""
    return service.progress(tournament.id)


@router.post("/{tournament_id}/draw", response_model=DrawResult, summary="Draw Groups (Admin Only)")
async def draw_tournament(
    tournament: TournamentConfig = Depends(get_existing_tournament),
    admin: str = Depends(get_current_admin),
    service: ProgressionService = Depends(get_progression_service),
):
    """
    Splits the approved players into groups and creates every group fixture.
    For a `knockout_only` tournament the first knockout round is created instead.
    Requires `capacity` approved players.
    """
    return service.draw(tournament.id)


@router.post("/{tournament_id}/knockout", response_model=List[MatchModel], summary="Seed Knockout Stage (Admin Only)")
async def seed_knockout(
    tournament: TournamentConfig = Depends(get_existing_tournament),
    admin: str = Depends(get_current_admin),
    service: ProgressionService = Depends(get_progression_service),
):
    """Seeds the knockout bracket from the group winners once every group match is approved."""
    return service.seed_knockout(tournament.id)


@router.get("/{tournament_id}/standings", response_model=List[GroupStandings], summary="Group Standings")
async def get_standings(
    tournament: TournamentConfig = Depends(get_existing_tournament),
    service: ProgressionService = Depends(get_progression_service),
):
    return service.group_standings(tournament.id)


@router.get("/{tournament_id}/bracket", response_model=List[KnockoutRound], summary="Knockout Bracket")
async def get_bracket(
    tournament: TournamentConfig = Depends(get_existing_tournament),
    service: ProgressionService = Depends(get_progression_service),
):
    return service.bracket(tournament.id)
