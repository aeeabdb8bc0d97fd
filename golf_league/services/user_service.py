import logging
from typing import List, Optional

from golf_league.core.exceptions import NotFoundError
from golf_league.core.json_store import JsonStore
from golf_league.models import utc_now
from golf_league.models.user_model import Principal, Role, UserModel
from golf_league.services.access_policy import Action, authorize, is_allowed

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: JsonStore):
        self.users = store.users

    def get_user(self, user_id: str) -> Optional[UserModel]:
        record = self.users.get(user_id)
        return UserModel(**record) if record else None

    def require_user(self, user_id: str) -> UserModel:
        user = self.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        matches = self.users.query(email=email)
        return UserModel(**matches[0]) if matches else None

    def ensure_user(self, user_id: str, email: str, role: Role = Role.PLAYER, name: Optional[str] = None) -> UserModel:
        """
        Returns the stored user, creating it from the identity provider's
        claims on first sight. Once stored, the record's role wins over the
        token's.
        """
        existing = self.get_user(user_id)
        if existing:
            return existing
        user = UserModel(user_id=user_id, email=email, role=role, name=name)
        self.users.put(user.to_record())
        logger.info("Registered user %s (%s) as %s", user.user_id, user.email, user.role)
        return user

    def list_users(self, actor: Principal, role: Optional[Role] = None, email: Optional[str] = None) -> List[UserModel]:
        """
        Admins see everyone, optionally filtered by email or role. Anyone else
        may look a user up by exact email, or otherwise sees only themself.
        """
        if not is_allowed(actor, Action.LIST_USERS):
            if email:
                return [UserModel(**r) for r in self.users.query(email=email)]
            me = self.get_user(actor.user_id)
            return [me] if me else []

        if email:
            records = self.users.query(email=email)
        elif role:
            records = self.users.query(role=Role(role).value)
        else:
            records = self.users.all()
        return [UserModel(**r) for r in records]

    def change_role(self, user_id: str, role: Role, actor: Principal) -> UserModel:
        authorize(actor, Action.CHANGE_ROLE)
        self.require_user(user_id)

        def apply(record: dict) -> dict:
            record["role"] = Role(role).value
            record["updated_at"] = utc_now().isoformat()
            return record

        updated = UserModel(**self.users.update((user_id,), apply))
        logger.info("User %s changed role of %s to %s", actor.user_id, user_id, updated.role)
        return updated
