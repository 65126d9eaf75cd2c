"""Post and comment schemas"""
from pydantic import BaseModel, Field, field_validator
from typing import List
from datetime import datetime

from app.schemas.auth_schemas import UserSummary


class PostCreate(BaseModel):
    image: str = Field(..., min_length=1, max_length=1024, description="Media URL")
    caption: str = Field("", max_length=2200)
    location: str = Field("", max_length=255)


class CommentCreate(BaseModel):
    post_id: int
    text: str = Field(..., min_length=1, max_length=500)

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class CommentResponse(BaseModel):
    id: int
    post_id: int
    user: UserSummary
    text: str
    likes: List[UserSummary] = []
    likes_count: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


class PostResponse(BaseModel):
    id: int
    user: UserSummary
    image: str
    caption: str
    location: str
    likes: List[UserSummary] = []
    likes_count: int = 0
    comments: List[CommentResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class LikeResponse(BaseModel):
    message: str
    is_liked: bool
    likes: int


class PostLikeResponse(LikeResponse):
    post: PostResponse
