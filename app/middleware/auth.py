"""Authentication dependencies"""
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional

from app.core.config import settings
from app.core.dependencies import get_db
from app.services.auth_service import decode_access_token, get_user_by_id
from app.models.user import User
from app.errors.exceptions import UnauthorizedException

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/signin", auto_error=False)


def resolve_user_from_token(db: Session, token: Optional[str]) -> Optional[User]:
    """Return the account a session token belongs to, or None"""
    token_data = decode_access_token(token)
    if token_data is None or token_data.user_id is None:
        return None
    return get_user_by_id(db, user_id=token_data.user_id)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from the bearer token"""
    if not token:
        raise UnauthorizedException(detail="No token, authorization denied")

    user = resolve_user_from_token(db, token)
    if user is None:
        raise UnauthorizedException(detail="Token is not valid")

    return user
