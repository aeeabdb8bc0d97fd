import datetime as dt
import random
from unittest.mock import patch

import pytest

from golf_league.core.exceptions import AuthorizationError, NotFoundError
from golf_league.services.playgroup_service import PlaygroupService
from golf_league.services.session_service import SessionService

TEE_DATE = dt.date(2026, 5, 2)
TEE_TIME = dt.time(8, 30)


@pytest.fixture
def session_service(store):
    return SessionService(store, rng=random.Random(11))


@pytest.fixture
def playgroup(store, leader, make_user):
    service = PlaygroupService(store)
    group = service.create_playgroup("Saturday Group", "", leader)
    for i in range(9):
        make_user(f"p{i}")
        service.add_member(group.playgroup_id, f"p{i}", leader)
    return service.require_playgroup(group.playgroup_id)


class TestCreateSession:

    def test_creates_session_and_foursomes(self, session_service: SessionService, playgroup, leader, store):
        session, foursomes = session_service.create_session(
            playgroup.playgroup_id, TEE_DATE, TEE_TIME, "Pebble Creek", leader)

        assert session.status == "scheduled"
        assert session.created_by == "leader"
        assert session.course_name == "Pebble Creek"

        placed = sorted(p for f in foursomes for p in f.player_ids)
        assert placed == sorted(playgroup.roster)
        assert len(placed) == 10
        assert len(foursomes) == 3
        assert len(store.foursomes.query(session_id=session.session_id)) == 3

    def test_default_course_name(self, session_service: SessionService, playgroup, leader):
        session, _ = session_service.create_session(playgroup.playgroup_id, TEE_DATE, TEE_TIME, None, leader)
        assert session.course_name == "Default Course"

    def test_member_cannot_create(self, session_service: SessionService, playgroup, make_user, store):
        member = make_user("p0")
        with pytest.raises(AuthorizationError):
            session_service.create_session(playgroup.playgroup_id, TEE_DATE, TEE_TIME, None, member)
        assert store.sessions.all() == []

    def test_admin_can_create(self, session_service: SessionService, playgroup, admin):
        session, _ = session_service.create_session(playgroup.playgroup_id, TEE_DATE, TEE_TIME, None, admin)
        assert session.created_by == "admin"

    def test_unknown_playgroup(self, session_service: SessionService, leader):
        with pytest.raises(NotFoundError):
            session_service.create_session("missing", TEE_DATE, TEE_TIME, None, leader)

    def test_foursome_write_failure_keeps_session(self, session_service: SessionService, playgroup, leader, store):
        with patch.object(session_service.foursomes, "put_many", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                session_service.create_session(playgroup.playgroup_id, TEE_DATE, TEE_TIME, None, leader)
        assert len(store.sessions.all()) == 1
        assert store.foursomes.all() == []


class TestReadSessions:

    def test_get_session_for_member(self, session_service: SessionService, playgroup, leader, make_user):
        session, _ = session_service.create_session(playgroup.playgroup_id, TEE_DATE, TEE_TIME, None, leader)
        member = make_user("p0")
        assert session_service.get_session(session.session_id, member).session_id == session.session_id

    def test_outsider_forbidden(self, session_service: SessionService, playgroup, leader, make_user):
        session, _ = session_service.create_session(playgroup.playgroup_id, TEE_DATE, TEE_TIME, None, leader)
        outsider = make_user("stranger")
        with pytest.raises(AuthorizationError):
            session_service.get_session(session.session_id, outsider)
        with pytest.raises(AuthorizationError):
            session_service.list_sessions(playgroup.playgroup_id, outsider)

    def test_missing_session(self, session_service: SessionService, leader):
        with pytest.raises(NotFoundError):
            session_service.get_session("missing", leader)

    def test_list_newest_first(self, session_service: SessionService, playgroup, leader):
        for day in (1, 15, 8):
            session_service.create_session(playgroup.playgroup_id, dt.date(2026, 6, day), TEE_TIME, None, leader)
        dates = [s.date for s in session_service.list_sessions(playgroup.playgroup_id, leader)]
        assert dates == [dt.date(2026, 6, 15), dt.date(2026, 6, 8), dt.date(2026, 6, 1)]
