import logging
from typing import Any, List, Optional, Sequence

from golf_league.core.exceptions import ConflictError, ValidationError
from golf_league.core.json_store import JsonStore
from golf_league.models.score_model import (
    HOLES_PER_ROUND,
    LeaderboardEntry,
    ScorecardModel,
    ScorecardStatus,
)
from golf_league.models.user_model import Principal
from golf_league.services.access_policy import Action, Resource, authorize, is_allowed
from golf_league.services.foursome_service import FoursomeService
from golf_league.services.leaderboard import build_leaderboard, total
from golf_league.services.session_service import SessionService

logger = logging.getLogger(__name__)


def validate_holes(holes: Any) -> List[int]:
    """Exactly 18 non-negative integers. Booleans and floats do not count."""
    if not isinstance(holes, (list, tuple)) or len(holes) != HOLES_PER_ROUND:
        raise ValidationError(f"holes must be an array of exactly {HOLES_PER_ROUND} scores")
    for score in holes:
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            raise ValidationError("All hole scores must be non-negative integers")
    return list(holes)


class ScoreService:
    def __init__(self, store: JsonStore):
        self.scores = store.scores
        self.foursome_service = FoursomeService(store)
        self.session_service = SessionService(store)

    def submit_score(
        self,
        foursome_id: str,
        player_id: str,
        holes: Sequence[Any],
        actor: Principal,
        submit: bool = False,
    ) -> ScorecardModel:
        """
        Writes a player's scorecard for a foursome, replacing whatever was
        there (last write wins; nothing is merged). A player has one card per
        session, so a card saved earlier under another foursome of the same
        session is replaced too.

        ``submit`` finalizes the card. A submitted card stays submitted and the
        player can no longer change it; the playgroup leader or an admin still
        can. The submitted check and the write happen in one store transaction.
        """
        holes = validate_holes(holes)
        with self.scores.transaction() as records:
            foursome, playgroup = self.foursome_service.foursome_context(foursome_id)
            resource = Resource.for_playgroup(playgroup, subject_id=player_id)
            authorize(actor, Action.SUBMIT_SCORE, resource)
            if player_id not in foursome.player_ids:
                raise ValidationError("Player is not in this foursome")

            def is_players_card(record: dict) -> bool:
                return record["session_id"] == foursome.session_id and record["player_id"] == player_id

            existing = next((r for r in records if is_players_card(r)), None)
            already_submitted = existing is not None and existing["status"] == ScorecardStatus.SUBMITTED.value
            if already_submitted and not self._can_correct(actor, resource):
                raise ConflictError("Scorecard has already been submitted")

            scorecard = ScorecardModel(
                foursome_id=foursome_id,
                player_id=player_id,
                session_id=foursome.session_id,
                holes=holes,
                total_score=total(holes),
                status=ScorecardStatus.SUBMITTED if (submit or already_submitted) else ScorecardStatus.DRAFT,
                updated_by=actor.user_id,
            )
            records[:] = [r for r in records if not is_players_card(r)]
            records.append(scorecard.to_record())

        logger.info("User %s saved %s scorecard for %s in foursome %s (total %d)",
                    actor.user_id, scorecard.status, player_id, foursome_id, scorecard.total_score)
        return scorecard

    @staticmethod
    def _can_correct(actor: Principal, resource: Resource) -> bool:
        # The same grants as SUBMIT_SCORE minus the player themself.
        return is_allowed(actor, Action.EDIT_FOURSOME, resource)

    def _session_participants(self, session_id: str) -> List[str]:
        foursomes = self.foursome_service.foursomes.query(session_id=session_id)
        return [p for f in foursomes for p in f["player_ids"]]

    def get_scorecard(self, foursome_id: str, player_id: str) -> Optional[ScorecardModel]:
        """``None`` means the player has not entered anything yet."""
        record = self.scores.get(foursome_id, player_id)
        return ScorecardModel(**record) if record else None

    def get_player_scorecard(self, foursome_id: str, player_id: str, actor: Principal) -> Optional[ScorecardModel]:
        foursome, playgroup = self.foursome_service.foursome_context(foursome_id)
        authorize(actor, Action.READ_SCORES, Resource.for_playgroup(playgroup, participant_ids=foursome.player_ids))
        return self.get_scorecard(foursome_id, player_id)

    def scores_for_foursome(self, foursome_id: str, actor: Principal) -> List[ScorecardModel]:
        foursome, playgroup = self.foursome_service.foursome_context(foursome_id)
        authorize(actor, Action.READ_SCORES, Resource.for_playgroup(playgroup, participant_ids=foursome.player_ids))
        return [ScorecardModel(**r) for r in self.scores.query(foursome_id=foursome_id)]

    def scores_for_session(self, session_id: str, actor: Principal) -> List[ScorecardModel]:
        _, playgroup = self.session_service.session_context(session_id)
        resource = Resource.for_playgroup(playgroup, participant_ids=self._session_participants(session_id))
        authorize(actor, Action.READ_SCORES, resource)
        return [ScorecardModel(**r) for r in self.scores.query(session_id=session_id)]

    def scores_for_player(self, player_id: str, actor: Principal) -> List[ScorecardModel]:
        authorize(actor, Action.READ_PLAYER_SCORES, Resource.for_subject(player_id))
        return [ScorecardModel(**r) for r in self.scores.query(player_id=player_id)]

    def leaderboard(self, session_id: str, actor: Principal, include_drafts: bool = False) -> List[LeaderboardEntry]:
        return build_leaderboard(self.scores_for_session(session_id, actor), include_drafts=include_drafts)
