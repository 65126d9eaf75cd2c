"""One-to-one chats and message persistence"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List

from app.db.base import utcnow
from app.errors.exceptions import ForbiddenException, InvalidTargetException, NotFoundException
from app.models.chat import Chat, ChatMessage, ChatParticipant, make_pair_key
from app.models.user import User


def get_chats_for_user(db: Session, user: User) -> List[Chat]:
    return (
        db.query(Chat)
        .join(ChatParticipant, ChatParticipant.chat_id == Chat.id)
        .filter(ChatParticipant.user_id == user.id)
        .order_by(Chat.updated_at.desc(), Chat.id.desc())
        .all()
    )


def get_or_create_chat(db: Session, user: User, receiver_id: int) -> Chat:
    """
    Return the chat between *user* and *receiver_id*, creating it if needed.
    The unique pair key makes concurrent creates converge on one chat.
    """
    if receiver_id == user.id:
        raise InvalidTargetException(detail="Cannot start a chat with yourself")
    if not db.query(User).filter(User.id == receiver_id).first():
        raise NotFoundException(detail="User not found")

    pair_key = make_pair_key(user.id, receiver_id)
    chat = db.query(Chat).filter(Chat.pair_key == pair_key).first()
    if chat:
        return chat

    chat = Chat(pair_key=pair_key)
    db.add(chat)
    try:
        db.flush()
        db.add_all([
            ChatParticipant(chat_id=chat.id, user_id=user.id),
            ChatParticipant(chat_id=chat.id, user_id=receiver_id),
        ])
        db.commit()
    except IntegrityError:
        db.rollback()
        return db.query(Chat).filter(Chat.pair_key == pair_key).one()
    db.refresh(chat)
    return chat


def get_chat_for_participant(db: Session, user: User, chat_id: int) -> Chat:
    chat = db.query(Chat).filter(Chat.id == chat_id).first()
    if not chat:
        raise NotFoundException(detail="Chat not found")
    is_participant = db.query(ChatParticipant).filter(
        ChatParticipant.chat_id == chat.id,
        ChatParticipant.user_id == user.id,
    ).first()
    if not is_participant:
        raise ForbiddenException()
    return chat


def add_message(db: Session, user: User, chat_id: int, text: str) -> Chat:
    """
    Persist a message. Real-time delivery is the relay's business, not this one's.
    """
    chat = get_chat_for_participant(db, user, chat_id)
    now = utcnow()
    db.add(ChatMessage(chat_id=chat.id, sender_id=user.id, text=text, created_at=now))
    chat.updated_at = now
    db.commit()
    db.refresh(chat)
    return chat
