from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from pydantic import Field

from golf_league.models import GolfModel, utc_now

FOURSOME_SIZE = 4


class FoursomeModel(GolfModel):
    foursome_id: str = Field(default_factory=lambda: str(uuid4()))
    session_id: str
    foursome_number: int = Field(ge=1)
    player_ids: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None


class FoursomeUpdateRequest(GolfModel):
    foursome_id: str = Field(..., min_length=1)
    # Size and uniqueness are checked by FoursomeService so the error is a plain 400.
    player_ids: List[str]


class RegenerateRequest(GolfModel):
    session_id: str = Field(..., min_length=1)
