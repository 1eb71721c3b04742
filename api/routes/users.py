"""
api/routes/users.py -- Profile and follow-graph endpoints.

Routes:
  GET  /api/users/profile/{username}  -- public view of any user
  GET  /api/users/suggested          -- up to four accounts to follow
  POST /api/users/follow/{user_id}    -- follow, or unfollow if already following
  POST /api/users/update              -- edit own profile / change password

All four require a session. The acting user always comes from the session
cookie, never from the request body, so a client can only edit its own
profile and its own follow edges.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from api.models import FollowResponse, PublicUser, UpdateProfileRequest
from auth.accounts import get_profile, suggested_users, toggle_follow, update_profile
from auth.dependencies import get_current_user
from auth.models import User
from auth.store import UserStore

router = APIRouter()


@router.get("/users/profile/{username}", response_model=PublicUser)
def profile(
    request: Request,
    username: str,
    current_user: User = Depends(get_current_user),
) -> PublicUser:
    user_store: UserStore = request.app.state.user_store
    return PublicUser.from_user(get_profile(user_store, username))


@router.get("/users/suggested", response_model=list[PublicUser])
def suggested(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> list[PublicUser]:
    """Random accounts the current user does not follow yet, excluding themselves."""
    user_store: UserStore = request.app.state.user_store
    return [PublicUser.from_user(u) for u in suggested_users(user_store, current_user)]


@router.post("/users/follow/{user_id}", response_model=FollowResponse)
def follow(
    request: Request,
    user_id: int,
    current_user: User = Depends(get_current_user),
) -> FollowResponse:
    """Toggle whether the current user follows user_id."""
    user_store: UserStore = request.app.state.user_store
    following = toggle_follow(user_store, current_user, user_id)
    message = "User followed successfully" if following else "User unfollowed successfully"
    return FollowResponse(message=message, following=following)


@router.post("/users/update", response_model=PublicUser)
def update(
    request: Request,
    body: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
) -> PublicUser:
    """Update the current user's profile. Username cannot be changed."""
    user_store: UserStore = request.app.state.user_store
    updated = update_profile(
        user_store,
        current_user,
        full_name=body.full_name,
        email=body.email,
        bio=body.bio,
        link=body.link,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return PublicUser.from_user(updated)
