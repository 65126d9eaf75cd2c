"""Authentication endpoints"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from app.core.dependencies import get_db
from app.services.auth_service import (
    authenticate_user,
    create_access_token,
    register_user,
    request_password_reset,
    resend_otp,
    reset_password,
    verify_otp,
)
from app.schemas.auth_schemas import (
    AuthResponse,
    EmailRequest,
    ForgotPasswordRequest,
    MessageResponse,
    OTPVerifyRequest,
    ResetPasswordRequest,
    SignInRequest,
    SignupRequest,
    SignupResponse,
    UserResponse,
)
from app.middleware.auth import get_current_user
from app.models.user import User
from app.utils.email import OTPSender, get_otp_sender

router = APIRouter()
logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If an account exists with this email, a password reset code has been sent."


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Session = Depends(get_db),
    send_otp: OTPSender = Depends(get_otp_sender),
):
    """
    ## Register a new account (Step 1 of 2)

    **Role:** Public — no authentication required.

    Creates an **unverified** account and emails a 6-digit OTP that expires
    in 10 minutes.

    ### Required fields (JSON body)
    | Field    | Type   | Description                    |
    |----------|--------|--------------------------------|
    | name     | string | Display name                   |
    | username | string | Unique, at least 3 characters  |
    | email    | string | Valid email — OTP is sent here |
    | password | string | Minimum 6 characters           |

    ### Errors
    - HTTP 409 `DUPLICATE_ACCOUNT` → email or username already taken.
    - HTTP 500 `EMAIL_DELIVERY_FAILURE` → the account exists but the code
      could not be sent; call **/auth/resend-otp**.
    """
    user = register_user(db, body, send_otp)
    return SignupResponse(
        message="User registered successfully. Please verify your email with OTP.",
        user_id=user.id,
    )


@router.post("/verify-otp", response_model=AuthResponse)
def verify_otp_endpoint(body: OTPVerifyRequest, db: Session = Depends(get_db)):
    """
    ## Verify the emailed OTP (Step 2 of 2)

    **Role:** Public — no authentication required.

    On success the account becomes verified and a 30-day session token is
    returned, so no extra sign-in step is needed.

    ### Errors
    - HTTP 404 → no account with this email.
    - HTTP 400 `ALREADY_VERIFIED` / `INVALID_CODE` / `EXPIRED`.
    """
    user = verify_otp(db, body.email, body.otp)
    return AuthResponse(
        message="Email verified successfully",
        access_token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.post("/resend-otp", response_model=MessageResponse)
def resend_otp_endpoint(
    body: EmailRequest,
    db: Session = Depends(get_db),
    send_otp: OTPSender = Depends(get_otp_sender),
):
    """
    ## Resend the verification OTP

    Issues a new code; the previous one stops working immediately.
    """
    resend_otp(db, body.email, send_otp)
    return MessageResponse(message="OTP sent successfully")


@router.post("/signin", response_model=AuthResponse)
def signin(body: SignInRequest, db: Session = Depends(get_db)):
    """
    ## Sign in with email and password

    **Role:** Public — no authentication required.

    ### Errors
    - HTTP 401 `INVALID_CREDENTIALS` → unknown email or wrong password.
    - HTTP 403 `NOT_VERIFIED` → correct password, email not verified yet.

    Attach the returned token to every subsequent request:
    `Authorization: Bearer <token>`.
    """
    user = authenticate_user(db, body.email, body.password)
    return AuthResponse(
        message="Login successful",
        access_token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Profile of the token owner"""
    return current_user


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Logged out successfully")


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    body: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    send_otp: OTPSender = Depends(get_otp_sender),
):
    """
    ## Request a password reset code

    `email` may hold an email address or a username. The response is the same
    whether or not an account matched.
    """
    request_password_reset(db, body.email, send_otp)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password_endpoint(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    """
    ## Reset the password with the emailed code

    ### Errors
    - HTTP 404 → no matching account.
    - HTTP 400 `INVALID_CODE` / `EXPIRED`.
    """
    reset_password(db, body.email, body.otp, body.new_password)
    return MessageResponse(message="Password reset successfully")
