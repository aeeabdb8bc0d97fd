from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from golf_league.core.exceptions import AuthenticationError
from golf_league.core.json_store import JsonStore
from golf_league.core.security import decode_access_token, role_claim
from golf_league.models.user_model import Principal, Role
from golf_league.services.foursome_service import FoursomeService
from golf_league.services.playgroup_service import PlaygroupService
from golf_league.services.score_service import ScoreService
from golf_league.services.session_service import SessionService
from golf_league.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> JsonStore:
    """The single store built by ``create_app``; every request shares its lock."""
    return request.app.state.store


def get_user_service(store: JsonStore = Depends(get_store)) -> UserService:
    return UserService(store)


def get_playgroup_service(store: JsonStore = Depends(get_store)) -> PlaygroupService:
    return PlaygroupService(store)


def get_session_service(store: JsonStore = Depends(get_store)) -> SessionService:
    return SessionService(store)


def get_foursome_service(store: JsonStore = Depends(get_store)) -> FoursomeService:
    return FoursomeService(store)


def get_score_service(store: JsonStore = Depends(get_store)) -> ScoreService:
    return ScoreService(store)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    user_service: UserService = Depends(get_user_service),
) -> Principal:
    """
    Resolves the bearer token to a Principal. The first request from a new
    identity registers the user with the role from the token; after that the
    stored role is used.
    """
    if credentials is None:
        raise AuthenticationError()
    payload = decode_access_token(credentials.credentials)

    try:
        token_role = Role(role_claim(payload) or Role.PLAYER.value)
    except ValueError:
        token_role = Role.PLAYER

    if not payload.get("email"):
        raise AuthenticationError("Token has no email")
    try:
        user = user_service.ensure_user(
            user_id=payload["sub"],
            email=payload["email"],
            role=token_role,
            name=payload.get("name"),
        )
    except PydanticValidationError:
        raise AuthenticationError("Token claims are invalid")
    return Principal(user_id=user.user_id, email=user.email, role=user.role)
