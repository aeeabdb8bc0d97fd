import logging
from typing import Dict, List

from golf_league.core.exceptions import ConflictError, NotFoundError
from golf_league.core.json_store import JsonStore
from golf_league.models import utc_now
from golf_league.models.playgroup_model import PlaygroupModel
from golf_league.models.user_model import Principal
from golf_league.services.access_policy import Action, Resource, authorize
from golf_league.services.user_service import UserService

logger = logging.getLogger(__name__)


class PlaygroupService:
    def __init__(self, store: JsonStore):
        self.playgroups = store.playgroups
        self.user_service = UserService(store)

    def require_playgroup(self, playgroup_id: str) -> PlaygroupModel:
        record = self.playgroups.get(playgroup_id)
        if not record:
            raise NotFoundError("Playgroup", playgroup_id)
        return PlaygroupModel(**record)

    def create_playgroup(self, name: str, description: str, actor: Principal) -> PlaygroupModel:
        authorize(actor, Action.CREATE_PLAYGROUP)
        playgroup = PlaygroupModel(
            name=name,
            description=description or "",
            leader_id=actor.user_id,
            leader_email=actor.email,
        )
        self.playgroups.put(playgroup.to_record())
        logger.info("User %s created playgroup %s (%s)", actor.user_id, playgroup.playgroup_id, playgroup.name)
        return playgroup

    def get_playgroup(self, playgroup_id: str, actor: Principal) -> PlaygroupModel:
        playgroup = self.require_playgroup(playgroup_id)
        authorize(actor, Action.READ_PLAYGROUP, Resource.for_playgroup(playgroup))
        return playgroup

    def list_playgroups_for(self, actor: Principal) -> List[PlaygroupModel]:
        """Playgroups the caller leads, then those they belong to, without repeats."""
        found: Dict[str, dict] = {}
        for record in self.playgroups.query(leader_id=actor.user_id):
            found[record["playgroup_id"]] = record
        for record in self.playgroups.query_contains("member_ids", actor.user_id):
            found.setdefault(record["playgroup_id"], record)
        return [PlaygroupModel(**r) for r in found.values()]

    def add_member(self, playgroup_id: str, user_id: str, actor: Principal) -> PlaygroupModel:
        playgroup = self.require_playgroup(playgroup_id)
        authorize(actor, Action.ADD_MEMBER, Resource.for_playgroup(playgroup))

        if user_id == playgroup.leader_id:
            raise ConflictError("User is already a member of this playgroup")
        self.user_service.require_user(user_id)

        try:
            record = self.playgroups.append_unique(
                (playgroup_id,),
                "member_ids",
                user_id,
                extra={"updated_at": utc_now().isoformat()},
            )
        except ConflictError:
            raise ConflictError("User is already a member of this playgroup")

        logger.info("User %s added %s to playgroup %s", actor.user_id, user_id, playgroup_id)
        return PlaygroupModel(**record)
