"""
Social graph edges.

Each table is a set: the composite primary key is the membership key, so a
pair can be present at most once and toggling is a single-row insert/delete.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, CheckConstraint, Index

from app.db.base import Base, utcnow


class Follow(Base):
    """follower -> followee. One row backs both ``following`` and ``followers``."""
    __tablename__ = "follows"
    __table_args__ = (
        CheckConstraint("follower_id <> followee_id", name="ck_follows_not_self"),
        Index("ix_follows_followee", "followee_id"),
    )

    follower_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    followee_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class PostLike(Base):
    __tablename__ = "post_likes"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class CommentLike(Base):
    __tablename__ = "comment_likes"

    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class StoryView(Base):
    """Append-only: rows are inserted once and never removed by the viewer."""
    __tablename__ = "story_views"

    story_id = Column(Integer, ForeignKey("stories.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
