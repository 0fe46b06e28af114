from typing import List
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class GroupModel(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    tournament_id: str
    label: str # "A", "B", ...
    name: str # display name, e.g. "Group A"
    player_ids: List[str] = Field(default_factory=list) # draw order, fixed after creation

    model_config = ConfigDict(from_attributes=True)
