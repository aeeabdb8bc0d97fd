import pytest

from golf_league.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from golf_league.services.playgroup_service import PlaygroupService


@pytest.fixture
def playgroup_service(store):
    return PlaygroupService(store)


@pytest.fixture
def playgroup(playgroup_service, leader):
    return playgroup_service.create_playgroup("Tuesday Group", "Nine at nine", leader)


class TestCreatePlaygroup:

    def test_leader_creates(self, playgroup_service: PlaygroupService, leader):
        group = playgroup_service.create_playgroup("Weekenders", "", leader)
        assert group.leader_id == "leader"
        assert group.leader_email == "leader@example.com"
        assert group.member_ids == []
        assert playgroup_service.require_playgroup(group.playgroup_id).name == "Weekenders"

    def test_admin_creates(self, playgroup_service: PlaygroupService, admin):
        assert playgroup_service.create_playgroup("Admins", "", admin).leader_id == "admin"

    def test_player_forbidden(self, playgroup_service: PlaygroupService, make_user, store):
        player = make_user("p1")
        with pytest.raises(AuthorizationError):
            playgroup_service.create_playgroup("Nope", "", player)
        assert store.playgroups.all() == []


class TestAddMember:

    def test_add_member(self, playgroup_service: PlaygroupService, playgroup, leader, make_user):
        make_user("p1")
        updated = playgroup_service.add_member(playgroup.playgroup_id, "p1", leader)
        assert updated.member_ids == ["p1"]
        assert updated.updated_at is not None

    def test_duplicate_rejected(self, playgroup_service: PlaygroupService, playgroup, leader, make_user):
        make_user("p1")
        playgroup_service.add_member(playgroup.playgroup_id, "p1", leader)
        with pytest.raises(ConflictError):
            playgroup_service.add_member(playgroup.playgroup_id, "p1", leader)
        assert playgroup_service.require_playgroup(playgroup.playgroup_id).member_ids == ["p1"]

    def test_leader_cannot_be_added(self, playgroup_service: PlaygroupService, playgroup, leader):
        with pytest.raises(ConflictError):
            playgroup_service.add_member(playgroup.playgroup_id, "leader", leader)

    def test_unknown_user(self, playgroup_service: PlaygroupService, playgroup, leader):
        with pytest.raises(NotFoundError):
            playgroup_service.add_member(playgroup.playgroup_id, "ghost", leader)

    def test_unknown_playgroup(self, playgroup_service: PlaygroupService, leader, make_user):
        make_user("p1")
        with pytest.raises(NotFoundError):
            playgroup_service.add_member("missing", "p1", leader)

    def test_only_leader_or_admin(self, playgroup_service: PlaygroupService, playgroup, make_user, admin):
        make_user("p1")
        outsider = make_user("lead2")
        with pytest.raises(AuthorizationError):
            playgroup_service.add_member(playgroup.playgroup_id, "p1", outsider)
        assert playgroup_service.add_member(playgroup.playgroup_id, "p1", admin).member_ids == ["p1"]


class TestReadPlaygroups:

    def test_member_can_read_outsider_cannot(self, playgroup_service: PlaygroupService, playgroup, leader, make_user):
        member = make_user("p1")
        outsider = make_user("p2")
        playgroup_service.add_member(playgroup.playgroup_id, "p1", leader)

        assert playgroup_service.get_playgroup(playgroup.playgroup_id, member).name == "Tuesday Group"
        with pytest.raises(AuthorizationError):
            playgroup_service.get_playgroup(playgroup.playgroup_id, outsider)

    def test_list_for_leader_and_member(self, playgroup_service: PlaygroupService, playgroup, leader, make_user, admin):
        member = make_user("p1")
        playgroup_service.add_member(playgroup.playgroup_id, "p1", leader)
        other = playgroup_service.create_playgroup("Other", "", admin)
        playgroup_service.add_member(other.playgroup_id, "p1", admin)

        assert [g.playgroup_id for g in playgroup_service.list_playgroups_for(leader)] == [playgroup.playgroup_id]
        member_groups = {g.playgroup_id for g in playgroup_service.list_playgroups_for(member)}
        assert member_groups == {playgroup.playgroup_id, other.playgroup_id}
