"""Profile reads and updates, account deletion"""
import logging

from sqlalchemy.orm import Session

from app.errors.exceptions import NotFoundException
from app.models.user import User
from app.schemas.user_schemas import ProfileUpdate
from app.utils.logger import log_account_event

logger = logging.getLogger(__name__)


def get_profile(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundException(detail="User not found")
    return user


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    """
    Apply only the fields present in the request body
    """
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def delete_account(db: Session, user: User) -> None:
    """
    Remove the account. Follow edges, content, likes, views and chat
    participation are removed by ON DELETE CASCADE.
    """
    user_id, email = user.id, user.email
    db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
    db.commit()
    log_account_event("DELETED", user_id, email)
