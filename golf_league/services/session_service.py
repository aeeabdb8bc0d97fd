import datetime as dt
import logging
import random
from typing import List, Optional, Tuple

from golf_league.core.config import settings
from golf_league.core.exceptions import NotFoundError
from golf_league.core.json_store import JsonStore
from golf_league.models.foursome_model import FoursomeModel
from golf_league.models.playgroup_model import PlaygroupModel
from golf_league.models.session_model import SessionModel
from golf_league.models.user_model import Principal
from golf_league.services.access_policy import Action, Resource, authorize
from golf_league.services.partitioner import partition_players
from golf_league.services.playgroup_service import PlaygroupService

logger = logging.getLogger(__name__)


class SessionService:
    def __init__(self, store: JsonStore, rng: Optional[random.Random] = None):
        self.sessions = store.sessions
        self.foursomes = store.foursomes
        self.playgroup_service = PlaygroupService(store)
        self.rng = rng

    def require_session(self, session_id: str) -> SessionModel:
        record = self.sessions.get(session_id)
        if not record:
            raise NotFoundError("Session", session_id)
        return SessionModel(**record)

    def session_context(self, session_id: str) -> Tuple[SessionModel, PlaygroupModel]:
        """The session together with the playgroup that owns it."""
        session = self.require_session(session_id)
        return session, self.playgroup_service.require_playgroup(session.playgroup_id)

    def create_session(
        self,
        playgroup_id: str,
        date: dt.date,
        time: dt.time,
        course_name: Optional[str],
        actor: Principal,
    ) -> Tuple[SessionModel, List[FoursomeModel]]:
        """
        Schedules a round and seeds its foursomes from the playgroup roster
        (leader plus members).

        The session is written first. If writing the foursomes then fails, the
        session stays and the error propagates; regenerating the foursomes is
        the repair path.
        """
        playgroup = self.playgroup_service.require_playgroup(playgroup_id)
        authorize(actor, Action.CREATE_SESSION, Resource.for_playgroup(playgroup))

        session = SessionModel(
            playgroup_id=playgroup_id,
            date=date,
            time=time,
            course_name=course_name or settings.DEFAULT_COURSE_NAME,
            created_by=actor.user_id,
        )
        self.sessions.put(session.to_record())
        logger.info("User %s scheduled session %s for playgroup %s on %s",
                    actor.user_id, session.session_id, playgroup_id, session.date)

        foursomes = partition_players(playgroup.roster, session.session_id, rng=self.rng)
        try:
            self.foursomes.put_many([f.to_record() for f in foursomes])
        except Exception:
            logger.exception("Session %s was created but its foursomes were not saved; "
                             "regenerate them to repair", session.session_id)
            raise
        return session, foursomes

    def get_session(self, session_id: str, actor: Principal) -> SessionModel:
        session, playgroup = self.session_context(session_id)
        authorize(actor, Action.READ_SESSION, Resource.for_playgroup(playgroup))
        return session

    def list_sessions(self, playgroup_id: str, actor: Principal) -> List[SessionModel]:
        """Sessions of a playgroup, most recent date first."""
        playgroup = self.playgroup_service.require_playgroup(playgroup_id)
        authorize(actor, Action.READ_PLAYGROUP, Resource.for_playgroup(playgroup))
        sessions = [SessionModel(**r) for r in self.sessions.query(playgroup_id=playgroup_id)]
        return sorted(sessions, key=lambda s: (s.date, s.time), reverse=True)
