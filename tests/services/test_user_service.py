import json

import pytest

from golf_league.core.exceptions import AuthorizationError, NotFoundError
from golf_league.models.user_model import Role
from golf_league.services.user_service import UserService


@pytest.fixture
def user_service(store):
    return UserService(store)


class TestUserService:

    def test_ensure_user_creates_on_first_sight(self, user_service: UserService, store):
        user = user_service.ensure_user("u1", "first@example.com", Role.GROUP_LEADER, name="First")
        assert user.user_id == "u1"
        assert user.role == Role.GROUP_LEADER

        with open(store.users.file_path) as f:
            users_in_file = json.load(f)
        assert len(users_in_file) == 1
        assert users_in_file[0]["email"] == "first@example.com"

    def test_ensure_user_keeps_stored_role(self, user_service: UserService):
        user_service.ensure_user("u1", "first@example.com", Role.PLAYER)
        again = user_service.ensure_user("u1", "first@example.com", Role.ADMIN)
        assert again.role == Role.PLAYER

    def test_get_user_by_email(self, user_service: UserService):
        user_service.ensure_user("u1", "findme@example.com")
        assert user_service.get_user_by_email("findme@example.com").user_id == "u1"
        assert user_service.get_user_by_email("nobody@example.com") is None

    def test_require_user_missing(self, user_service: UserService):
        with pytest.raises(NotFoundError):
            user_service.require_user("ghost")


class TestListUsers:

    def test_admin_sees_everyone_and_filters(self, user_service: UserService, make_user, admin, leader):
        make_user("p1")
        make_user("p2")
        assert len(user_service.list_users(admin)) == 4
        players = user_service.list_users(admin, role=Role.PLAYER)
        assert sorted(u.user_id for u in players) == ["p1", "p2"]
        by_email = user_service.list_users(admin, email="p2@example.com")
        assert [u.user_id for u in by_email] == ["p2"]

    def test_non_admin_sees_only_self(self, user_service: UserService, make_user, leader):
        make_user("p1")
        assert [u.user_id for u in user_service.list_users(leader)] == ["leader"]

    def test_non_admin_can_look_up_by_email(self, user_service: UserService, make_user, leader):
        make_user("p1")
        assert [u.user_id for u in user_service.list_users(leader, email="p1@example.com")] == ["p1"]

    def test_non_admin_role_filter_is_ignored(self, user_service: UserService, make_user):
        me = make_user("p1")
        make_user("p2")
        assert [u.user_id for u in user_service.list_users(me, role=Role.PLAYER)] == ["p1"]


class TestChangeRole:

    def test_admin_changes_role(self, user_service: UserService, make_user, admin):
        make_user("p1")
        updated = user_service.change_role("p1", Role.GROUP_LEADER, admin)
        assert updated.role == Role.GROUP_LEADER
        assert updated.updated_at is not None
        assert user_service.get_user("p1").role == Role.GROUP_LEADER

    def test_non_admin_forbidden(self, user_service: UserService, make_user, leader):
        make_user("p1")
        with pytest.raises(AuthorizationError):
            user_service.change_role("p1", Role.ADMIN, leader)
        assert user_service.get_user("p1").role == Role.PLAYER

    def test_unknown_user(self, user_service: UserService, admin):
        with pytest.raises(NotFoundError):
            user_service.change_role("ghost", Role.ADMIN, admin)
