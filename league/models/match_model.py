from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MatchStage(str, Enum):
    GROUPS = "groups"
    KNOCKOUT = "knockout"


class MatchStatus(str, Enum):
    PENDING_RESULT = "pending_result"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"


KNOCKOUT_LABEL = "Knockout"


class MatchSeed(BaseModel):
    """A fixture: who plays whom, before anything is stored or played."""

    stage: MatchStage
    group_id: Optional[str] = None # groups stage only
    group_name: Optional[str] = None
    round_number: int = 1
    match_in_round: int = 1 # bracket position within a knockout round

    player1_id: str
    player2_id: str
    player1_name: str
    player2_name: str

    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode="after")
    def players_must_differ(self):
        if self.player1_id == self.player2_id:
            raise ValueError("A match needs two different players")
        return self


class MatchModel(MatchSeed):
    id: str = Field(default_factory=lambda: str(uuid4()))
    tournament_id: str

    score1: Optional[int] = None
    score2: Optional[int] = None
    winner_id: Optional[str] = None # None until approved, and for drawn group matches
    evidence_url: Optional[str] = None # screenshot of the final score

    status: MatchStatus = MatchStatus.PENDING_RESULT
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    @model_validator(mode="after")
    def scores_are_paired(self):
        if (self.score1 is None) != (self.score2 is None):
            raise ValueError("Scores must be both set or both empty")
        if self.status == MatchStatus.APPROVED and self.score1 is None:
            raise ValueError("An approved match must carry both scores")
        return self

    @classmethod
    def from_seed(cls, seed: MatchSeed, tournament_id: str) -> "MatchModel":
        return cls(tournament_id=tournament_id, **seed.model_dump())

    @property
    def loser_id(self) -> Optional[str]:
        if self.winner_id is None:
            return None
        return self.player2_id if self.winner_id == self.player1_id else self.player1_id

    @property
    def display_group(self) -> str:
        return self.group_name or KNOCKOUT_LABEL
