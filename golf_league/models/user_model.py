from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field

from golf_league.models import GolfModel, utc_now


class Role(str, Enum):
    PLAYER = "Player"
    GROUP_LEADER = "GroupLeader"
    ADMIN = "Admin"


class UserModel(GolfModel):
    user_id: str
    email: EmailStr
    name: Optional[str] = None
    role: Role = Role.PLAYER
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None


class Principal(GolfModel):
    """The authenticated caller of a request."""
    user_id: str
    email: Optional[str] = None
    role: Role = Role.PLAYER


class RoleChangeRequest(GolfModel):
    user_id: str = Field(..., min_length=1)
    role: Role
