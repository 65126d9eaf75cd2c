"""
Set-membership toggles for follows, likes and story views.

Every toggle is one conditional statement against the edge table: a DELETE
that reports whether a row existed, falling back to an INSERT whose primary
key rejects duplicates. There is no read-then-write window, so double submits
and concurrent toggles cannot leave duplicate or lost edges.
"""
import logging
from typing import Tuple, Type

from sqlalchemy import func, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.base import Base
from app.errors.exceptions import InvalidTargetException, NotFoundException
from app.models.post import Comment, Post
from app.models.social import CommentLike, Follow, PostLike, StoryView
from app.models.story import Story
from app.models.user import User

logger = logging.getLogger(__name__)


def _key_filter(edge_model: Type[Base], key: dict):
    return [getattr(edge_model, column) == value for column, value in key.items()]


def count_members(db: Session, edge_model: Type[Base], **key) -> int:
    return db.query(func.count()).select_from(edge_model).filter(*_key_filter(edge_model, key)).scalar()


def add_member(db: Session, edge_model: Type[Base], **key) -> bool:
    """
    Insert the edge if absent. Returns True if this call created it.
    """
    try:
        db.execute(insert(edge_model).values(**key))
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def toggle_membership(db: Session, edge_model: Type[Base], **key) -> bool:
    """
    Flip membership of the edge identified by *key*; returns the new state.
    """
    removed = db.query(edge_model).filter(*_key_filter(edge_model, key)).delete(synchronize_session=False)
    if removed:
        db.commit()
        return False

    # Losing an insert race to an identical toggle leaves the edge present
    add_member(db, edge_model, **key)
    return True


# ── Follow ────────────────────────────────────────────────────────────────────

def toggle_follow(db: Session, actor: User, target_id: int) -> Tuple[bool, int, int]:
    """
    Follow or unfollow *target_id*.

    Returns (is_following, actor's following count, target's followers count).
    """
    if actor.id == target_id:
        raise InvalidTargetException(detail="Cannot follow yourself")

    target = db.query(User).filter(User.id == target_id).first()
    if not target:
        raise NotFoundException(detail="User not found")

    is_following = toggle_membership(db, Follow, follower_id=actor.id, followee_id=target.id)
    logger.info(f"User {actor.id} {'followed' if is_following else 'unfollowed'} user {target.id}")
    return (
        is_following,
        count_members(db, Follow, follower_id=actor.id),
        count_members(db, Follow, followee_id=target.id),
    )


# ── Likes ─────────────────────────────────────────────────────────────────────

def toggle_post_like(db: Session, actor: User, post_id: int) -> Tuple[Post, bool, int]:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundException(detail="Post not found")

    is_liked = toggle_membership(db, PostLike, post_id=post.id, user_id=actor.id)
    db.refresh(post)
    return post, is_liked, count_members(db, PostLike, post_id=post.id)


def toggle_comment_like(db: Session, actor: User, comment_id: int) -> Tuple[bool, int]:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise NotFoundException(detail="Comment not found")

    is_liked = toggle_membership(db, CommentLike, comment_id=comment.id, user_id=actor.id)
    return is_liked, count_members(db, CommentLike, comment_id=comment.id)


# ── Story views ───────────────────────────────────────────────────────────────

def mark_viewed(db: Session, actor: User, story: Story) -> None:
    """Record that *actor* saw *story*. Idempotent and never removes a view."""
    add_member(db, StoryView, story_id=story.id, user_id=actor.id)
