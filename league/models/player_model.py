from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class PlayerStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


class StatDelta(BaseModel):
    """Change to a player's stat triple produced by one approved result."""

    points: int = 0
    goals_for: int = 0
    goals_against: int = 0

    model_config = ConfigDict(frozen=True)

    def negated(self) -> "StatDelta":
        return StatDelta(points=-self.points, goals_for=-self.goals_for, goals_against=-self.goals_against)


class PlayerModel(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    tournament_id: str
    display_name: str = Field(min_length=1, max_length=40) # in-game name, unique per tournament
    real_name: str = Field(min_length=1, max_length=100)
    avatar_url: Optional[str] = None
    status: PlayerStatus = PlayerStatus.PENDING
    eliminated: bool = False

    group_id: Optional[str] = None
    group_name: Optional[str] = None

    points: int = 0
    goals_for: int = 0
    goals_against: int = 0

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def with_delta(self, delta: StatDelta) -> "PlayerModel":
        return self.model_copy(update={
            "points": self.points + delta.points,
            "goals_for": self.goals_for + delta.goals_for,
            "goals_against": self.goals_against + delta.goals_against,
        })
