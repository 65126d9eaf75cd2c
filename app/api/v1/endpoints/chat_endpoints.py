"""Chat endpoints: persistence only, live delivery goes through the relay"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.core.dependencies import get_db
from app.middleware.auth import get_current_user
from app.models.user import User
from app.schemas.chat_schemas import ChatCreate, ChatResponse, MessageCreate
from app.services.chat_service import (
    add_message,
    get_chat_for_participant,
    get_chats_for_user,
    get_or_create_chat,
)

router = APIRouter()


@router.get("/", response_model=List[ChatResponse])
def list_chats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Chats the caller takes part in, most recently active first"""
    return get_chats_for_user(db, current_user)


@router.post("/", response_model=ChatResponse)
def open_chat(
    body: ChatCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ## Create or fetch the chat with another user

    Returns the existing chat if the two accounts already have one.
    """
    return get_or_create_chat(db, current_user, body.receiver_id)


@router.get("/{chat_id}", response_model=ChatResponse)
def get_chat(
    chat_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Participants only; HTTP 403 otherwise"""
    return get_chat_for_participant(db, current_user, chat_id)


@router.post("/{chat_id}/message", response_model=ChatResponse)
def send_message(
    chat_id: int,
    body: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return add_message(db, current_user, chat_id, body.text)
