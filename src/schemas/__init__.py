"""HTTP request/response schemas."""

from src.schemas.auth_schemas import (
    ErrorResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    ValidationErrorResponse,
)

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TokenResponse",
    "ValidationErrorResponse",
]
