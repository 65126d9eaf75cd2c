"""Profile and follow endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_db
from app.middleware.auth import get_current_user
from app.models.user import User
from app.schemas.auth_schemas import MessageResponse, UserResponse
from app.schemas.user_schemas import (
    FollowResponse,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
)
from app.services.social_graph import toggle_follow
from app.services.user_service import delete_account, get_profile, update_profile

router = APIRouter()


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_my_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ## Update the caller's profile

    Send any of `name`, `bio` (max 150), `website`, `phone`,
    `profile_picture`; omitted fields are left unchanged.
    """
    user = update_profile(db, current_user, body)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.delete("/delete-account", response_model=MessageResponse)
def delete_my_account(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    delete_account(db, current_user)
    return MessageResponse(message="Account deleted successfully")


@router.get("/{user_id}", response_model=ProfileResponse)
def get_user_profile(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Profile with followers and following"""
    return get_profile(db, user_id)


@router.post("/{user_id}/follow", response_model=FollowResponse)
def follow_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ## Follow / unfollow a user

    Calling it again undoes the previous call.

    ### Errors
    - HTTP 400 `INVALID_TARGET` → following yourself.
    - HTTP 404 → unknown user.
    """
    is_following, following_count, followers_count = toggle_follow(db, current_user, user_id)
    return FollowResponse(
        message="Followed successfully" if is_following else "Unfollowed successfully",
        is_following=is_following,
        following_count=following_count,
        followers_count=followers_count,
    )
