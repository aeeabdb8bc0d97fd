import logging
import random
from typing import Dict, List, Optional, Tuple

from golf_league.core.exceptions import NotFoundError, ValidationError
from golf_league.core.json_store import JsonStore
from golf_league.models import utc_now
from golf_league.models.foursome_model import FOURSOME_SIZE, FoursomeModel
from golf_league.models.playgroup_model import PlaygroupModel
from golf_league.models.user_model import Principal
from golf_league.services.access_policy import Action, Resource, authorize
from golf_league.services.partitioner import partition_players
from golf_league.services.session_service import SessionService
from golf_league.services.user_service import UserService

logger = logging.getLogger(__name__)


def follow_players(cards: List[dict], session_id: str, placements: Dict[str, str]) -> int:
    """
    Re-keys the session's scorecards of every player in ``placements`` to
    the foursome the player now sits in. A player keeps one card per
    session wherever they are moved. Returns how many cards moved.
    """
    moved = 0
    for card in cards:
        new_foursome_id = placements.get(card["player_id"])
        if card["session_id"] == session_id and new_foursome_id and card["foursome_id"] != new_foursome_id:
            card["foursome_id"] = new_foursome_id
            moved += 1
    return moved


class FoursomeService:
    def __init__(self, store: JsonStore, rng: Optional[random.Random] = None):
        self.foursomes = store.foursomes
        self.scores = store.scores
        self.session_service = SessionService(store, rng=rng)
        self.user_service = UserService(store)
        self.rng = rng

    def require_foursome(self, foursome_id: str) -> FoursomeModel:
        record = self.foursomes.get(foursome_id)
        if not record:
            raise NotFoundError("Foursome", foursome_id)
        return FoursomeModel(**record)

    def foursome_context(self, foursome_id: str) -> Tuple[FoursomeModel, PlaygroupModel]:
        foursome = self.require_foursome(foursome_id)
        _, playgroup = self.session_service.session_context(foursome.session_id)
        return foursome, playgroup

    def list_foursomes(self, session_id: str, actor: Principal) -> List[FoursomeModel]:
        _, playgroup = self.session_service.session_context(session_id)
        authorize(actor, Action.READ_SESSION, Resource.for_playgroup(playgroup))
        foursomes = [FoursomeModel(**r) for r in self.foursomes.query(session_id=session_id)]
        return sorted(foursomes, key=lambda f: f.foursome_number)

    def update_players(self, foursome_id: str, player_ids: List[str], actor: Principal) -> FoursomeModel:
        """
        Replaces one foursome's roster.

        Any listed player who currently sits in another foursome of the same
        session is moved out of it in the same write, and a foursome emptied
        by the move is dropped, so the session stays a partition. Players do
        not have to belong to the playgroup; any known user may be placed.
        Scorecards of the listed players move to this foursome with them.
        """
        if not isinstance(player_ids, list) or not 1 <= len(player_ids) <= FOURSOME_SIZE:
            raise ValidationError(f"playerIds must contain 1-{FOURSOME_SIZE} players")
        if len(set(player_ids)) != len(player_ids):
            raise ValidationError("playerIds must not repeat a player")

        foursome, playgroup = self.foursome_context(foursome_id)
        authorize(actor, Action.EDIT_FOURSOME, Resource.for_playgroup(playgroup))
        for player_id in player_ids:
            self.user_service.require_user(player_id)

        moved = set(player_ids)
        stamp = utc_now().isoformat()
        with self.foursomes.transaction() as records:
            target = next((r for r in records if r["foursome_id"] == foursome_id), None)
            if target is None:
                raise NotFoundError("Foursome", foursome_id)

            kept = []
            for record in records:
                if record is not target and record["session_id"] == foursome.session_id:
                    remaining = [p for p in record["player_ids"] if p not in moved]
                    if len(remaining) != len(record["player_ids"]):
                        if not remaining:
                            logger.info("Foursome %s emptied by move into %s; dropping it",
                                        record["foursome_id"], foursome_id)
                            continue
                        record.update(player_ids=remaining, updated_at=stamp, updated_by=actor.user_id)
                kept.append(record)

            target.update(player_ids=list(player_ids), updated_at=stamp, updated_by=actor.user_id)
            records[:] = kept
            updated = FoursomeModel(**target)

            with self.scores.transaction() as cards:
                followed = follow_players(cards, foursome.session_id, {p: foursome_id for p in player_ids})

        logger.info("User %s set foursome %s to %s (%d scorecards moved with their players)",
                    actor.user_id, foursome_id, player_ids, followed)
        return updated

    def regenerate(self, session_id: str, actor: Principal) -> List[FoursomeModel]:
        """
        Throws away the session's foursomes, manual edits included, and
        partitions again. Existing scorecards follow their players into the
        new foursomes.
        """
        session, playgroup = self.session_service.session_context(session_id)
        authorize(actor, Action.EDIT_FOURSOME, Resource.for_playgroup(playgroup))

        foursomes = partition_players(playgroup.roster, session.session_id, rng=self.rng)
        placements = {p: f.foursome_id for f in foursomes for p in f.player_ids}
        with self.scores.transaction() as cards:
            self.foursomes.replace_where({"session_id": session_id}, [f.to_record() for f in foursomes])
            followed = follow_players(cards, session_id, placements)
        logger.info("User %s regenerated %d foursomes for session %s (%d scorecards moved with their players)",
                    actor.user_id, len(foursomes), session_id, followed)
        return foursomes
