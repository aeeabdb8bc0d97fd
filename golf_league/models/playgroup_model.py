from datetime import datetime
from typing import List, Literal, Optional
from uuid import uuid4

from pydantic import Field

from golf_league.models import GolfModel, utc_now


class PlaygroupModel(GolfModel):
    playgroup_id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    leader_id: str
    leader_email: Optional[str] = None
    # The leader is implicitly a member and is never listed here.
    member_ids: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    @property
    def roster(self) -> List[str]:
        """Leader first, then members in the order they joined."""
        return [self.leader_id] + [m for m in self.member_ids if m != self.leader_id]


class PlaygroupCreateRequest(GolfModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""


class AddMemberRequest(GolfModel):
    action: Literal["addMember"]
    playgroup_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
