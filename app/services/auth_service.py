"""Account lifecycle: registration, OTP verification, sign-in and password reset"""
from datetime import timedelta
from typing import Optional
import logging
import secrets
from passlib.context import CryptContext
from jose import JWTError, jwt
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.base import utcnow
from app.errors.exceptions import (
    AlreadyVerifiedException,
    DuplicateAccountException,
    EmailDeliveryException,
    ExpiredCodeException,
    InvalidCodeException,
    InvalidCredentialsException,
    NotFoundException,
    NotVerifiedException,
)
from app.models.user import User
from app.schemas.auth_schemas import SignupRequest, TokenData
from app.utils.email import OTPSender, PASSWORD_RESET, VERIFICATION
from app.utils.logger import log_account_event

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a hashed password"""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


# ── Session credential ────────────────────────────────────────────────────────

def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token bound to *user_id*
    """
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: Optional[str]) -> Optional[TokenData]:
    """
    Decode and validate a session token; None if missing, tampered or expired
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info(f"JWT decode error: {str(e)}")
        return None

    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        return None
    return TokenData(user_id=user_id)


# ── Lookups ───────────────────────────────────────────────────────────────────

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_identifier(db: Session, identifier: str) -> Optional[User]:
    """
    Match an email address or a username, case-insensitively
    """
    key = identifier.lower()
    return db.query(User).filter(or_(User.email == key, User.username == key)).first()


# ── OTP helpers ───────────────────────────────────────────────────────────────

def generate_otp() -> str:
    """Return a uniformly random 6-digit code in [100000, 999999]."""
    return str(100000 + secrets.randbelow(900000))


def issue_otp(db: Session, user: User) -> str:
    """
    Store a fresh OTP on *user*, replacing any pending one, and return it.
    """
    otp_code = generate_otp()
    db.query(User).filter(User.id == user.id).update(
        {
            User.otp_code: otp_code,
            User.otp_expires_at: utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
        },
        synchronize_session=False,
    )
    db.commit()
    db.refresh(user)
    return otp_code


def check_otp(user: User, otp_code: str) -> None:
    """
    Raise unless *otp_code* is the pending, unexpired OTP of *user*.
    A mismatch is reported before expiry.
    """
    if user.otp_code is None or not secrets.compare_digest(user.otp_code, otp_code):
        raise InvalidCodeException()
    if utcnow() > user.otp_expires_at:
        raise ExpiredCodeException()


# ── Lifecycle operations ──────────────────────────────────────────────────────

def register_user(db: Session, data: SignupRequest, send_otp: OTPSender) -> User:
    """
    Create an unverified account and email its OTP.

    The account is committed before dispatch; a delivery failure raises
    EmailDeliveryException but leaves the account in place so the user can
    ask for a new code.
    """
    existing = db.query(User).filter(
        or_(User.email == data.email, User.username == data.username)
    ).first()
    if existing:
        raise DuplicateAccountException()

    otp_code = generate_otp()
    user = User(
        name=data.name,
        username=data.username,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        is_verified=False,
        otp_code=otp_code,
        otp_expires_at=utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent signup for the same email/username
        db.rollback()
        raise DuplicateAccountException()
    db.refresh(user)
    log_account_event("REGISTERED", user.id, user.email)

    if not send_otp(user.email, otp_code, VERIFICATION):
        log_account_event("OTP EMAIL", user.id, user.email, error="delivery failed after signup")
        raise EmailDeliveryException(detail="Failed to send OTP email")

    return user


def verify_otp(db: Session, email: str, otp_code: str) -> User:
    """
    Mark the account verified and consume its OTP.
    """
    user = get_user_by_email(db, email)
    if not user:
        raise NotFoundException(detail="User not found")
    if user.is_verified:
        raise AlreadyVerifiedException()
    check_otp(user, otp_code)

    # Guarded on the code so a concurrent verify/resend cannot double-consume it
    consumed = db.query(User).filter(
        User.id == user.id,
        User.otp_code == otp_code,
        User.is_verified == False,  # noqa: E712
    ).update(
        {User.is_verified: True, User.otp_code: None, User.otp_expires_at: None},
        synchronize_session=False,
    )
    db.commit()
    if not consumed:
        db.refresh(user)
        if user.is_verified:
            # a concurrent verify consumed the code first
            raise AlreadyVerifiedException()
        raise InvalidCodeException()

    db.refresh(user)
    log_account_event("VERIFIED", user.id, user.email)
    return user


def resend_otp(db: Session, email: str, send_otp: OTPSender) -> None:
    """
    Issue a new verification OTP; the previous code stops working at once.
    """
    user = get_user_by_email(db, email)
    if not user:
        raise NotFoundException(detail="User not found")
    if user.is_verified:
        raise AlreadyVerifiedException()

    otp_code = issue_otp(db, user)
    if not send_otp(user.email, otp_code, VERIFICATION):
        log_account_event("OTP EMAIL", user.id, user.email, error="delivery failed on resend")
        raise EmailDeliveryException(detail="Failed to send OTP email")


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Check credentials. Unknown email and wrong password are indistinguishable;
    the verification state is only revealed once the password matched.
    """
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        raise InvalidCredentialsException()
    if not user.is_verified:
        raise NotVerifiedException()

    log_account_event("SIGNED IN", user.id, user.email)
    return user


def request_password_reset(db: Session, identifier: str, send_otp: OTPSender) -> None:
    """
    Send a reset OTP if *identifier* matches an account.

    Returns normally whether or not the account exists, and whether or not
    the email went out, so callers cannot probe for accounts.
    """
    user = get_user_by_identifier(db, identifier)
    if not user:
        logger.info("Password reset requested for unknown account")
        return

    otp_code = issue_otp(db, user)
    if send_otp(user.email, otp_code, PASSWORD_RESET):
        log_account_event("PASSWORD RESET REQUESTED", user.id, user.email)
    else:
        log_account_event("RESET EMAIL", user.id, user.email, error="delivery failed")


def reset_password(db: Session, identifier: str, otp_code: str, new_password: str) -> User:
    """
    Replace the password of the account matching *identifier* and consume the OTP.
    """
    user = get_user_by_identifier(db, identifier)
    if not user:
        raise NotFoundException(detail="User not found")
    check_otp(user, otp_code)

    consumed = db.query(User).filter(
        User.id == user.id,
        User.otp_code == otp_code,
    ).update(
        {
            User.hashed_password: get_password_hash(new_password),
            User.otp_code: None,
            User.otp_expires_at: None,
        },
        synchronize_session=False,
    )
    db.commit()
    if not consumed:
        raise InvalidCodeException()

    db.refresh(user)
    log_account_event("PASSWORD RESET", user.id, user.email)
    return user
