import datetime as dt
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import Field

from golf_league.models import GolfModel, utc_now


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"


class SessionModel(GolfModel):
    session_id: str = Field(default_factory=lambda: str(uuid4()))
    playgroup_id: str
    date: dt.date
    time: dt.time
    course_name: str
    status: SessionStatus = SessionStatus.SCHEDULED
    created_at: dt.datetime = Field(default_factory=utc_now)
    created_by: str


class SessionCreateRequest(GolfModel):
    playgroup_id: str = Field(..., min_length=1)
    date: dt.date
    time: dt.time
    course_name: Optional[str] = None
