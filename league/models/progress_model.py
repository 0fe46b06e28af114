from typing import List, Optional

from pydantic import BaseModel, Field

from .group_model import GroupModel
from .match_model import MatchModel
from .player_model import PlayerModel


class DrawResult(BaseModel):
    groups: List[GroupModel] = Field(default_factory=list)
    matches: List[MatchModel] = Field(default_factory=list)


class GroupStandings(BaseModel):
    group: GroupModel
    players: List[PlayerModel] # ranked, best first


class KnockoutRound(BaseModel):
    round_number: int
    matches: List[MatchModel]


class TournamentProgress(BaseModel):
    tournament_id: str
    status: str
    group_matches_total: int = 0
    group_matches_approved: int = 0
    matches_awaiting_approval: int = 0
    knockout_ready: bool = False
    current_knockout_round: Optional[int] = None
    champion_id: Optional[str] = None
