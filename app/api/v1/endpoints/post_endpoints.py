"""Post endpoints"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.core.dependencies import get_db
from app.middleware.auth import get_current_user
from app.models.user import User
from app.schemas.auth_schemas import MessageResponse
from app.schemas.post_schemas import PostCreate, PostLikeResponse, PostResponse
from app.services.post_service import create_post, delete_post, get_post, get_posts
from app.services.social_graph import toggle_post_like

router = APIRouter()


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_new_post(
    body: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ## Create a post

    ### Required fields (JSON body)
    | Field    | Type   | Description                  |
    |----------|--------|------------------------------|
    | image    | string | Media URL (required)         |
    | caption  | string | Up to 2200 characters        |
    | location | string | Free text                    |
    """
    return create_post(db, current_user, body)


@router.get("/", response_model=List[PostResponse])
def list_posts(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Feed of all posts, newest first, with likers and comments"""
    return get_posts(db, skip=skip, limit=limit)


@router.get("/{post_id}", response_model=PostResponse)
def get_single_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_post(db, post_id)


@router.post("/{post_id}/like", response_model=PostLikeResponse)
def like_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Like / unlike a post"""
    post, is_liked, likes = toggle_post_like(db, current_user, post_id)
    return PostLikeResponse(
        message="Post liked" if is_liked else "Post unliked",
        is_liked=is_liked,
        likes=likes,
        post=PostResponse.model_validate(post),
    )


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_own_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Owner only; HTTP 403 otherwise"""
    delete_post(db, current_user, post_id)
    return MessageResponse(message="Post deleted successfully")
