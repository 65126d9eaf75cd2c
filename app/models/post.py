"""Posts and comments"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.db.base import Base, utcnow


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    image = Column(String(1024), nullable=False)
    caption = Column(String(2200), nullable=False, default="")
    location = Column(String(255), nullable=False, default="")
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", lazy="joined")
    likes = relationship("User", secondary="post_likes", viewonly=True)
    comments = relationship(
        "Comment",
        order_by="Comment.created_at",
        viewonly=True,
    )

    def __repr__(self):
        return f"<Post(id={self.id}, user_id={self.user_id})>"

    @property
    def likes_count(self) -> int:
        return len(self.likes)


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_post_created", "post_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", lazy="joined")
    likes = relationship("User", secondary="comment_likes", viewonly=True)

    def __repr__(self):
        return f"<Comment(id={self.id}, post_id={self.post_id}, user_id={self.user_id})>"

    @property
    def likes_count(self) -> int:
        return len(self.likes)
