"""Story schemas"""
from pydantic import BaseModel, Field
from typing import List
from datetime import datetime

from app.schemas.auth_schemas import UserSummary


class StoryCreate(BaseModel):
    image: str = Field(..., min_length=1, max_length=1024, description="Media URL")


class StoryItem(BaseModel):
    id: int
    image: str
    views: List[UserSummary] = []
    created_at: datetime
    expires_at: datetime

    class Config:
        from_attributes = True


class StoryResponse(StoryItem):
    user: UserSummary


class StoryGroup(BaseModel):
    """Live stories of one author, newest first"""
    user: UserSummary
    stories: List[StoryItem]
