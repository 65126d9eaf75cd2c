"""Stories: ephemeral content with a fixed expiry."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, validates

from app.db.base import Base, utcnow


class Story(Base):
    """
    A story is visible while ``expires_at > now``.

    Lifecycle
    ---------
    1. Created with ``expires_at = created_at + STORY_TTL_HOURS``.
    2. Once expired it is filtered out of every read.
    3. The background sweeper deletes expired rows some time later.
    """

    __tablename__ = "stories"
    __table_args__ = (
        Index("ix_stories_user_created", "user_id", "created_at"),
        Index("ix_stories_expires_at", "expires_at"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    image = Column(String(1024), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", lazy="joined")
    views = relationship("User", secondary="story_views", viewonly=True)

    @validates("expires_at")
    def _validate_expires_at(self, key, value):
        if self.expires_at is not None and value != self.expires_at:
            raise ValueError("Story expiry cannot be changed once set")
        return value

    def __repr__(self) -> str:
        return f"<Story(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
