from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from golf_league.models import GolfModel
from golf_league.models.user_model import Principal, Role, RoleChangeRequest, UserModel
from golf_league.routes.dependencies import get_current_user, get_user_service
from golf_league.services.user_service import UserService

router = APIRouter()


class UserListResponse(GolfModel):
    users: List[UserModel]


class UserResponse(GolfModel):
    user: UserModel


@router.get("", response_model=UserListResponse, summary="List or look up users")
async def list_users(
    role: Optional[Role] = Query(None, description="Admin only: filter by role"),
    email: Optional[str] = Query(None, description="Exact email lookup"),
    current_user: Principal = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """
    Admins get every user, optionally filtered by `email` or `role`.
    Everyone else can look a user up by exact `email` (to add them to a
    playgroup) and otherwise only sees their own record.
    """
    return UserListResponse(users=service.list_users(current_user, role=role, email=email))


@router.post("", response_model=UserResponse, summary="Change a user's role (Admin only)")
async def change_user_role(
    payload: RoleChangeRequest,
    current_user: Principal = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse(user=service.change_role(payload.user_id, payload.role, current_user))
