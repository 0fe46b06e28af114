from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Path, Query, UploadFile
from pydantic import BaseModel, Field

from league.core.security import get_current_admin
from league.models import MatchModel, MatchStage, MatchStatus, TournamentConfig
from league.routes.dependencies import get_progression_service
from league.routes.tournament_routes import get_existing_tournament
from league.services.progression_service import ProgressionService

router = APIRouter()


class DirectResultPayload(BaseModel):
    """Scores entered by the admin; replaces or skips the player's report."""

    score1: int = Field(..., ge=0)
    score2: int = Field(..., ge=0)


@router.get("/tournaments/{tournament_id}/matches", response_model=List[MatchModel], summary="List Matches")
async def list_matches(
    tournament: TournamentConfig = Depends(get_existing_tournament),
    stage: Optional[MatchStage] = Query(None),
    group_id: Optional[str] = Query(None),
    status: Optional[MatchStatus] = Query(None, description="e.g. pending_approval for the review queue"),
    service: ProgressionService = Depends(get_progression_service),
):
    return service.list_matches(tournament.id, stage=stage, group_id=group_id, status=status)


@router.get("/matches/{match_id}", response_model=MatchModel, summary="Get Match")
async def get_match(
    match_id: str = Path(..., description="The ID of the match"),
    service: ProgressionService = Depends(get_progression_service),
):
    return service.get_match(match_id)


@router.post("/matches/{match_id}/report", response_model=MatchModel, summary="Report Match Result")
async def report_result(
    match_id: str = Path(..., description="The ID of the match"),
    score1: int = Form(..., description="Goals scored by player 1"),
    score2: int = Form(..., description="Goals scored by player 2"),
    screenshot: Optional[UploadFile] = File(None, description="Screenshot of the final score"),
    service: ProgressionService = Depends(get_progression_service),
):
    """
    Submits a result for review. A match accepts one submission until an admin rejects it.
    """
    evidence = await screenshot.read() if screenshot else None
    return await service.report_result(
        match_id,
        score1,
        score2,
        evidence=evidence,
        evidence_filename=(screenshot.filename if screenshot else None) or "result.png",
    )


@router.post("/matches/{match_id}/approve", response_model=MatchModel, summary="Approve Match Result (Admin Only)")
async def approve_result(
    match_id: str = Path(..., description="The ID of the match"),
    payload: Optional[DirectResultPayload] = Body(None),
    admin: str = Depends(get_current_admin),
    service: ProgressionService = Depends(get_progression_service),
):
    """
    Approves the reported result and updates the group standings.
    With a body, the admin's scores are used instead; this also approves a match nobody reported.
    """
    if payload is None:
        return service.approve_result(match_id)
    return service.approve_result(match_id, payload.score1, payload.score2)


@router.post("/matches/{match_id}/reject", response_model=MatchModel, summary="Reject Match Result (Admin Only)")
async def reject_result(
    match_id: str = Path(..., description="The ID of the match"),
    admin: str = Depends(get_current_admin),
    service: ProgressionService = Depends(get_progression_service),
):
    """Clears the result so it can be reported again. Points already awarded are taken back."""
    return service.reject_result(match_id)
