"""Chat and real-time relay schemas"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Literal
from datetime import datetime

from app.schemas.auth_schemas import UserSummary


class ChatCreate(BaseModel):
    receiver_id: int


class MessageCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class ChatMessageResponse(BaseModel):
    id: int
    sender_id: int
    text: str
    created_at: datetime

    class Config:
        from_attributes = True


class ChatResponse(BaseModel):
    id: int
    participants: List[UserSummary]
    messages: List[ChatMessageResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RelayMessageIn(BaseModel):
    """Frame a client sends over the socket"""
    event: Literal["send-message"]
    receiver_id: int
    message: str = Field(..., min_length=1, max_length=2000)


class RelayMessageOut(BaseModel):
    """Frame pushed to the receiver's sockets"""
    event: Literal["receive-message"] = "receive-message"
    sender_id: int
    message: str
    timestamp: datetime
