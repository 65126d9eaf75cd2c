"""Error handling module"""
from app.errors.exceptions import (
    BaseHTTPException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    InternalServerException,
    ValidationException,
    DatabaseException,
    DuplicateAccountException,
    AlreadyVerifiedException,
    InvalidCodeException,
    ExpiredCodeException,
    InvalidCredentialsException,
    NotVerifiedException,
    EmailDeliveryException,
    InvalidTargetException,
)

__all__ = [
    "BaseHTTPException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "InternalServerException",
    "ValidationException",
    "DatabaseException",
    "DuplicateAccountException",
    "AlreadyVerifiedException",
    "InvalidCodeException",
    "ExpiredCodeException",
    "InvalidCredentialsException",
    "NotVerifiedException",
    "EmailDeliveryException",
    "InvalidTargetException",
]
