import pytest

from golf_league.core.json_store import JsonStore
from golf_league.models.user_model import Principal, Role, UserModel


@pytest.fixture
def store(tmp_path):
    return JsonStore(str(tmp_path / "data"))


@pytest.fixture
def make_user(store):
    """Registers a user directly in the store and returns the matching Principal."""
    def _make_user(user_id: str, role: Role = Role.PLAYER) -> Principal:
        user = UserModel(user_id=user_id, email=f"{user_id}@example.com", role=role)
        store.users.put(user.to_record())
        return Principal(user_id=user.user_id, email=user.email, role=user.role)
    return _make_user


@pytest.fixture
def leader(make_user):
    return make_user("leader", Role.GROUP_LEADER)


@pytest.fixture
def admin(make_user):
    return make_user("admin", Role.ADMIN)
