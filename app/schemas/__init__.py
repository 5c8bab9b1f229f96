"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    Principal,
    TokenResponse,
    ValidationErrorResponse,
    ValidationFailure,
)
from app.schemas.health import HealthResponse
from app.schemas.user import RegistrationRequest, UserResponse, UserUpdateRequest

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "Principal",
    "RegistrationRequest",
    "TokenResponse",
    "UserResponse",
    "UserUpdateRequest",
    "ValidationErrorResponse",
    "ValidationFailure",
]
