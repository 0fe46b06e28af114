from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProgressionSystem(str, Enum):
    ROUND_ROBIN_KNOCKOUT = "round_robin+knockout"
    KNOCKOUT_ONLY = "knockout_only"


class TournamentStatus(str, Enum):
    OPEN = "open" # registration and approval
    ACTIVE = "active" # group stage drawn
    KNOCKOUT = "knockout" # knockout bracket seeded
    FINISHED = "finished"


class TournamentConfig(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=3, max_length=100)
    capacity: int = Field(default=8, ge=2) # approved players needed before the draw
    group_size: int = Field(default=4, ge=2)
    qualifiers_per_group: int = Field(default=2, ge=1)
    progression_system: ProgressionSystem = ProgressionSystem.ROUND_ROBIN_KNOCKOUT
    status: TournamentStatus = TournamentStatus.OPEN

    champion_id: Optional[str] = None
    knockout_bye_id: Optional[str] = None # player carried into the next knockout round unpaired
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    @model_validator(mode="after")
    def qualifiers_fit_in_group(self):
        if self.qualifiers_per_group > self.group_size:
            raise ValueError("qualifiers_per_group cannot exceed group_size")
        return self
