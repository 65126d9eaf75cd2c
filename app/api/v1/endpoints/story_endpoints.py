"""Story endpoints. Only unexpired stories are ever returned."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.core.dependencies import get_db
from app.middleware.auth import get_current_user
from app.models.user import User
from app.schemas.auth_schemas import MessageResponse
from app.schemas.story_schemas import StoryCreate, StoryGroup, StoryResponse
from app.services.social_graph import mark_viewed
from app.services.story_service import (
    create_story,
    delete_story,
    get_live_story,
    group_by_author,
    live_stories,
)

router = APIRouter()


@router.post("/", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
def create_new_story(
    body: StoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ## Post a story

    Visible for 24 hours, then hidden from every listing and removed by the
    background sweep.
    """
    return create_story(db, current_user, body.image)


@router.get("/", response_model=List[StoryGroup])
def list_stories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Live stories grouped by author"""
    return group_by_author(live_stories(db).all())


@router.get("/user/{user_id}", response_model=List[StoryResponse])
def list_user_stories(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return live_stories(db, user_id=user_id).all()


@router.post("/{story_id}/view", response_model=MessageResponse)
def view_story(
    story_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Idempotent; HTTP 404 for unknown or expired stories"""
    story = get_live_story(db, story_id)
    mark_viewed(db, current_user, story)
    return MessageResponse(message="Story marked as viewed")


@router.delete("/{story_id}", response_model=MessageResponse)
def delete_own_story(
    story_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    delete_story(db, current_user, story_id)
    return MessageResponse(message="Story deleted successfully")
