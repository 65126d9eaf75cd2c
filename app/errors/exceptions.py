"""Custom exceptions for error handling"""
from fastapi import HTTPException, status


class BaseHTTPException(HTTPException):
    """Base exception class for all custom HTTP exceptions"""
    code = "ERROR"

    def __init__(self, detail: str = None, headers: dict = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.detail,
            headers=headers
        )


class BadRequestException(BaseHTTPException):
    """400 Bad Request"""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Bad request"
    code = "BAD_REQUEST"


class UnauthorizedException(BaseHTTPException):
    """401 Unauthorized"""
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"
    code = "UNAUTHORIZED"

    def __init__(self, detail: str = None):
        super().__init__(
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenException(BaseHTTPException):
    """403 Forbidden: ownership or participation check failed"""
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Not authorized"
    code = "FORBIDDEN"


class NotFoundException(BaseHTTPException):
    """404 Not Found"""
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"
    code = "NOT_FOUND"


class ConflictException(BaseHTTPException):
    """409 Conflict"""
    status_code = status.HTTP_409_CONFLICT
    detail = "Resource already exists"
    code = "CONFLICT"


class InternalServerException(BaseHTTPException):
    """500 Internal Server Error"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"
    code = "INTERNAL_ERROR"


class ValidationException(BaseHTTPException):
    """422 Validation Error"""
    status_code = 422
    detail = "Validation error"
    code = "VALIDATION_FAILURE"


class DatabaseException(InternalServerException):
    """Storage operation failed"""
    detail = "Database error occurred"
    code = "STORAGE_FAILURE"


# ── Account lifecycle ─────────────────────────────────────────────────────────

class DuplicateAccountException(ConflictException):
    """Email or username already claimed"""
    detail = "User already exists with this email or username"
    code = "DUPLICATE_ACCOUNT"


class AlreadyVerifiedException(BadRequestException):
    detail = "Email already verified"
    code = "ALREADY_VERIFIED"


class InvalidCodeException(BadRequestException):
    detail = "Invalid OTP"
    code = "INVALID_CODE"


class ExpiredCodeException(BadRequestException):
    detail = "OTP has expired. Please request a new one."
    code = "EXPIRED"


class InvalidCredentialsException(UnauthorizedException):
    """Unknown email and wrong password share this error."""
    detail = "Invalid credentials"
    code = "INVALID_CREDENTIALS"


class NotVerifiedException(ForbiddenException):
    detail = "Please verify your email first"
    code = "NOT_VERIFIED"


class EmailDeliveryException(InternalServerException):
    detail = "Failed to send email. Please try again later."
    code = "EMAIL_DELIVERY_FAILURE"


# ── Social graph ──────────────────────────────────────────────────────────────

class InvalidTargetException(BadRequestException):
    detail = "Invalid target"
    code = "INVALID_TARGET"
