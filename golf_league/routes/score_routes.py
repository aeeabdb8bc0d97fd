from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from golf_league.core.exceptions import ValidationError
from golf_league.models import GolfModel
from golf_league.models.score_model import LeaderboardEntry, ScorecardModel, ScoreSubmitRequest
from golf_league.models.user_model import Principal
from golf_league.routes.dependencies import get_current_user, get_score_service
from golf_league.services.score_service import ScoreService

router = APIRouter()


class ScoreResponse(GolfModel):
    score: ScorecardModel


class ScoreLookupResponse(GolfModel):
    """``entered`` is false (and ``score`` null) until the player saves a card."""
    score: Optional[ScorecardModel] = None
    entered: bool


class ScoreListResponse(GolfModel):
    scores: List[ScorecardModel]


class LeaderboardResponse(GolfModel):
    session_id: str
    leaderboard: List[LeaderboardEntry]


@router.get("", summary="Get scores by foursome, session or player")
async def get_scores(
    foursome_id: Optional[str] = Query(None, alias="foursomeId"),
    session_id: Optional[str] = Query(None, alias="sessionId"),
    player_id: Optional[str] = Query(None, alias="playerId"),
    current_user: Principal = Depends(get_current_user),
    service: ScoreService = Depends(get_score_service),
):
    """
    Pass exactly one of `foursomeId`, `sessionId` or `playerId`.
    `foursomeId` together with `playerId` fetches that one scorecard.
    """
    if foursome_id and player_id:
        card = service.get_player_scorecard(foursome_id, player_id, current_user)
        return ScoreLookupResponse(score=card, entered=card is not None)
    if foursome_id:
        return ScoreListResponse(scores=service.scores_for_foursome(foursome_id, current_user))
    if session_id:
        return ScoreListResponse(scores=service.scores_for_session(session_id, current_user))
    if player_id:
        return ScoreListResponse(scores=service.scores_for_player(player_id, current_user))
    raise ValidationError("foursomeId, sessionId, or playerId query parameter required")


@router.put("", response_model=ScoreResponse, summary="Save or submit a scorecard")
async def put_score(
    payload: ScoreSubmitRequest,
    current_user: Principal = Depends(get_current_user),
    service: ScoreService = Depends(get_score_service),
):
    """
    - **holes**: 18 non-negative integers, hole 1 first.
    - **submit** (optional): finalize the card. Players cannot change a
      submitted card; the playgroup leader or an admin can.
    """
    scorecard = service.submit_score(
        foursome_id=payload.foursome_id,
        player_id=payload.player_id,
        holes=payload.holes,
        actor=current_user,
        submit=payload.submit,
    )
    return ScoreResponse(score=scorecard)


@router.get("/leaderboard", response_model=LeaderboardResponse, summary="Session leaderboard")
async def get_leaderboard(
    session_id: str = Query(..., alias="sessionId"),
    include_drafts: bool = Query(False, alias="includeDrafts"),
    current_user: Principal = Depends(get_current_user),
    service: ScoreService = Depends(get_score_service),
):
    """Submitted scorecards ranked by total, lowest first; ties are ordered by player id."""
    return LeaderboardResponse(
        session_id=session_id,
        leaderboard=service.leaderboard(session_id, current_user, include_drafts=include_drafts),
    )
