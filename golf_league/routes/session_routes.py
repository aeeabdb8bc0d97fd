from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from golf_league.core.exceptions import ValidationError
from golf_league.models import GolfModel
from golf_league.models.foursome_model import FoursomeModel
from golf_league.models.session_model import SessionCreateRequest, SessionModel
from golf_league.models.user_model import Principal
from golf_league.routes.dependencies import get_current_user, get_session_service
from golf_league.services.session_service import SessionService

router = APIRouter()


class SessionResponse(GolfModel):
    session: SessionModel


class SessionListResponse(GolfModel):
    sessions: List[SessionModel]


class SessionCreatedResponse(GolfModel):
    session: SessionModel
    foursomes: List[FoursomeModel]


@router.get("", summary="Get one session or list a playgroup's sessions")
async def get_sessions(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    playgroup_id: Optional[str] = Query(None, alias="playgroupId"),
    current_user: Principal = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Either `sessionId` or `playgroupId` is required. Playgroup listings are newest first."""
    if session_id:
        return SessionResponse(session=service.get_session(session_id, current_user))
    if playgroup_id:
        return SessionListResponse(sessions=service.list_sessions(playgroup_id, current_user))
    raise ValidationError("sessionId or playgroupId query parameter required")


@router.post("", response_model=SessionCreatedResponse, status_code=201, summary="Schedule a session")
async def create_session(
    payload: SessionCreateRequest,
    current_user: Principal = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """
    Creates a session for the playgroup (leader or Admin only) and
    immediately splits the playgroup roster into foursomes.

    - **date**: ISO date of the round.
    - **time**: tee time, `HH:MM`.
    - **courseName** (optional): defaults to the configured course name.
    """
    session, foursomes = service.create_session(
        playgroup_id=payload.playgroup_id,
        date=payload.date,
        time=payload.time,
        course_name=payload.course_name,
        actor=current_user,
    )
    return SessionCreatedResponse(session=session, foursomes=foursomes)
