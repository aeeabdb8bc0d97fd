from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response
from pydantic import ValidationError as PydanticValidationError

from golf_league.core.exceptions import ValidationError
from golf_league.models import GolfModel
from golf_league.models.playgroup_model import AddMemberRequest, PlaygroupCreateRequest, PlaygroupModel
from golf_league.models.user_model import Principal
from golf_league.routes.dependencies import get_current_user, get_playgroup_service
from golf_league.services.playgroup_service import PlaygroupService

router = APIRouter()

ADD_MEMBER_ACTION = "addMember"


class PlaygroupResponse(GolfModel):
    playgroup: PlaygroupModel


class PlaygroupListResponse(GolfModel):
    playgroups: List[PlaygroupModel]


def _parse(model, body: Dict[str, Any]):
    try:
        return model.model_validate(body)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationError(f"{field}: {first.get('msg')}" if field else first.get("msg"))


@router.get("", summary="Get one playgroup or list the caller's playgroups")
async def get_playgroups(
    playgroup_id: Optional[str] = Query(None, alias="playgroupId"),
    current_user: Principal = Depends(get_current_user),
    service: PlaygroupService = Depends(get_playgroup_service),
):
    """
    With `playgroupId`, returns that playgroup if the caller leads it, belongs
    to it, or is an admin. Without it, lists every playgroup the caller leads
    or belongs to.
    """
    if playgroup_id:
        return PlaygroupResponse(playgroup=service.get_playgroup(playgroup_id, current_user))
    return PlaygroupListResponse(playgroups=service.list_playgroups_for(current_user))


@router.post("", summary="Create a playgroup, or add a member to one")
async def post_playgroup(
    response: Response,
    body: Dict[str, Any] = Body(...),
    current_user: Principal = Depends(get_current_user),
    service: PlaygroupService = Depends(get_playgroup_service),
):
    """
    - `{name, description}` creates a playgroup led by the caller (GroupLeader or Admin).
    - `{action: "addMember", playgroupId, userId}` adds an existing user (leader or Admin).
    """
    if body.get("action") == ADD_MEMBER_ACTION:
        request = _parse(AddMemberRequest, body)
        playgroup = service.add_member(request.playgroup_id, request.user_id, current_user)
        return PlaygroupResponse(playgroup=playgroup)

    request = _parse(PlaygroupCreateRequest, body)
    playgroup = service.create_playgroup(request.name, request.description, current_user)
    response.status_code = 201
    return PlaygroupResponse(playgroup=playgroup)
