"""Authentication and account schemas"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime


OTP_PATTERN = r"^\d{6}$"


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class UserSummary(BaseModel):
    """Public card shown wherever another account is referenced"""
    id: int
    name: str
    username: str
    profile_picture: str = ""

    class Config:
        from_attributes = True


class UserResponse(UserSummary):
    """Schema for user response"""
    email: str
    bio: str = ""
    website: str = ""
    phone: str = ""
    is_verified: bool
    created_at: datetime


class SignupRequest(BaseModel):
    """Schema for creating a new account"""
    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)

    @field_validator("name", "username", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if any(ch.isspace() for ch in v):
            raise ValueError("Username cannot contain whitespace")
        return v.lower()

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class SignupResponse(BaseModel):
    message: str
    user_id: int


class OTPVerifyRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., pattern=OTP_PATTERN, description="6-digit code from the email")


class EmailRequest(BaseModel):
    """Resend OTP"""
    email: EmailStr


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Email address or username")

    @field_validator("email", mode="before")
    @classmethod
    def strip_identifier(cls, v):
        return _strip(v)


class ResetPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Email address or username")
    otp: str = Field(..., pattern=OTP_PATTERN)
    new_password: str = Field(..., min_length=6, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def strip_identifier(cls, v):
        return _strip(v)


class AuthResponse(BaseModel):
    """Token response schema"""
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


class TokenData(BaseModel):
    """Token data schema for JWT payload"""
    user_id: Optional[int] = None
