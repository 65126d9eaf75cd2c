"""Profile and follow schemas"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from app.schemas.auth_schemas import UserResponse, UserSummary


class ProfileResponse(UserResponse):
    """Full profile with both sides of the follow graph"""
    followers: List[UserSummary] = []
    following: List[UserSummary] = []
    followers_count: int = 0
    following_count: int = 0


class ProfileUpdate(BaseModel):
    """Only the fields that are sent are changed"""
    name: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = Field(None, max_length=150)
    website: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    profile_picture: Optional[str] = Field(None, max_length=1024)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserResponse


class FollowResponse(BaseModel):
    message: str
    is_following: bool
    following_count: int
    followers_count: int
