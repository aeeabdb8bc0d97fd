from datetime import datetime
from enum import Enum
from typing import Any, List

from pydantic import Field

from golf_league.models import GolfModel, utc_now

HOLES_PER_ROUND = 18
FRONT_NINE = slice(0, 9)
BACK_NINE = slice(9, 18)


class ScorecardStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"


class ScorecardModel(GolfModel):
    foursome_id: str
    player_id: str
    session_id: str
    holes: List[int]
    total_score: int
    status: ScorecardStatus = ScorecardStatus.DRAFT
    updated_at: datetime = Field(default_factory=utc_now)
    updated_by: str


class ScoreSubmitRequest(GolfModel):
    foursome_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    # Left untyped so that "4" or 4.5 reach ScoreService and are rejected there
    # instead of being coerced.
    holes: List[Any]
    submit: bool = False


class LeaderboardEntry(GolfModel):
    rank: int
    player_id: str
    foursome_id: str
    total_score: int
    front_nine: int
    back_nine: int
    status: ScorecardStatus
