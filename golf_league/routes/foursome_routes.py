from typing import List

from fastapi import APIRouter, Depends, Query

from golf_league.models import GolfModel
from golf_league.models.foursome_model import FoursomeModel, FoursomeUpdateRequest, RegenerateRequest
from golf_league.models.user_model import Principal
from golf_league.routes.dependencies import get_current_user, get_foursome_service
from golf_league.services.foursome_service import FoursomeService

router = APIRouter()


class FoursomeResponse(GolfModel):
    foursome: FoursomeModel


class FoursomeListResponse(GolfModel):
    foursomes: List[FoursomeModel]


@router.get("", response_model=FoursomeListResponse, summary="List a session's foursomes")
async def list_foursomes(
    session_id: str = Query(..., alias="sessionId"),
    current_user: Principal = Depends(get_current_user),
    service: FoursomeService = Depends(get_foursome_service),
):
    return FoursomeListResponse(foursomes=service.list_foursomes(session_id, current_user))


@router.put("", response_model=FoursomeResponse, summary="Replace a foursome's players (leader or Admin)")
async def update_foursome(
    payload: FoursomeUpdateRequest,
    current_user: Principal = Depends(get_current_user),
    service: FoursomeService = Depends(get_foursome_service),
):
    """
    Sets the foursome to exactly `playerIds` (1-4 existing users). Players
    listed here are taken out of any other foursome in the same session.
    """
    return FoursomeResponse(foursome=service.update_players(payload.foursome_id, payload.player_ids, current_user))


@router.post("/regenerate", response_model=FoursomeListResponse, summary="Re-draw all foursomes of a session")
async def regenerate_foursomes(
    payload: RegenerateRequest,
    current_user: Principal = Depends(get_current_user),
    service: FoursomeService = Depends(get_foursome_service),
):
    """Discards every foursome of the session, manual edits included, and partitions the roster again."""
    return FoursomeListResponse(foursomes=service.regenerate(payload.session_id, current_user))
