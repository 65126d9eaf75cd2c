"""Database models"""
from app.models.user import User
from app.models.social import Follow, PostLike, CommentLike, StoryView
from app.models.post import Post, Comment
from app.models.story import Story
from app.models.chat import Chat, ChatParticipant, ChatMessage, make_pair_key

__all__ = [
    "User", "Follow", "PostLike", "CommentLike", "StoryView",
    "Post", "Comment", "Story",
    "Chat", "ChatParticipant", "ChatMessage", "make_pair_key",
]
