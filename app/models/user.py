"""User account model: identity, credential, verification and OTP state"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import relationship, validates

from app.db.base import Base, utcnow


class User(Base):
    """
    A social account.

    ``otp_code``/``otp_expires_at`` are set together or cleared together.
    ``is_verified`` only ever moves from False to True.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "(otp_code IS NULL AND otp_expires_at IS NULL) OR "
            "(otp_code IS NOT NULL AND otp_expires_at IS NOT NULL)",
            name="ck_users_otp_pair",
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    username = Column(String(50), unique=True, nullable=False, index=True)  # lower-cased
    email = Column(String(255), unique=True, nullable=False, index=True)  # lower-cased
    hashed_password = Column(String(255), nullable=False)

    bio = Column(String(150), nullable=False, default="")
    website = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    profile_picture = Column(String(1024), nullable=False, default="")

    is_verified = Column(Boolean, default=False, nullable=False)
    otp_code = Column(String(6), nullable=True)
    otp_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, onupdate=utcnow, nullable=True)

    followers = relationship(
        "User",
        secondary="follows",
        primaryjoin="User.id == Follow.followee_id",
        secondaryjoin="User.id == Follow.follower_id",
        viewonly=True,
    )
    following = relationship(
        "User",
        secondary="follows",
        primaryjoin="User.id == Follow.follower_id",
        secondaryjoin="User.id == Follow.followee_id",
        viewonly=True,
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', verified={self.is_verified})>"

    @validates("is_verified")
    def _validate_is_verified(self, key, value):
        if self.is_verified and not value:
            raise ValueError("A verified account cannot become unverified")
        return value

    @property
    def followers_count(self) -> int:
        return len(self.followers)

    @property
    def following_count(self) -> int:
        return len(self.following)
