"""Comment endpoints"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.core.dependencies import get_db
from app.middleware.auth import get_current_user
from app.models.user import User
from app.schemas.auth_schemas import MessageResponse
from app.schemas.post_schemas import CommentCreate, CommentResponse, LikeResponse
from app.services.post_service import create_comment, delete_comment, get_comments_for_post
from app.services.social_graph import toggle_comment_like

router = APIRouter()


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    body: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Comment on a post (`post_id`, `text` up to 500 characters)"""
    return create_comment(db, current_user, body)


@router.get("/post/{post_id}", response_model=List[CommentResponse])
def list_comments(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_comments_for_post(db, post_id)


@router.post("/{comment_id}/like", response_model=LikeResponse)
def like_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    is_liked, likes = toggle_comment_like(db, current_user, comment_id)
    return LikeResponse(
        message="Comment liked" if is_liked else "Comment unliked",
        is_liked=is_liked,
        likes=likes,
    )


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_own_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    delete_comment(db, current_user, comment_id)
    return MessageResponse(message="Comment deleted successfully")
