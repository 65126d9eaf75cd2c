"""Pydantic schemas for request/response validation"""
from app.schemas.auth_schemas import (
    UserSummary,
    UserResponse,
    AuthResponse,
    MessageResponse,
)
from app.schemas.user_schemas import ProfileResponse, FollowResponse
from app.schemas.post_schemas import PostResponse, CommentResponse, LikeResponse
from app.schemas.story_schemas import StoryResponse, StoryGroup
from app.schemas.chat_schemas import ChatResponse, ChatMessageResponse

__all__ = [
    "UserSummary",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
    "ProfileResponse",
    "FollowResponse",
    "PostResponse",
    "CommentResponse",
    "LikeResponse",
    "StoryResponse",
    "StoryGroup",
    "ChatResponse",
    "ChatMessageResponse",
]
