"""Authentication request/response schemas.

Pydantic models for API request validation and response serialization.
Kept separate from domain records - these are HTTP-layer concerns.
JSON field names are camelCase; Python attributes are snake_case.

Endpoints (paths configurable, defaults shown):
    POST /api/auth/register  - Register and receive tokens
    POST /api/auth/login     - Authenticate and receive tokens
    POST /api/auth/logout    - Revoke all refresh tokens of the user
    POST /api/token/refresh  - Exchange refresh token for access token
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.enums import UserRole


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Registration / Login
# =============================================================================


class RegisterRequest(CamelModel):
    """Request schema for registration.

    Blank values pass schema validation and are rejected by the engine
    (400 validation_failed).
    """

    email: str = Field(
        ...,
        description="User's email address (normalized to lowercase)",
        examples=["alice@example.com"],
    )
    username: str = Field(
        ...,
        description="Unique username",
        examples=["alice"],
    )
    password: str = Field(
        ...,
        description="Password (8-128 chars, mixed case, digit, special char)",
        examples=["P@ssw0rd!"],
    )
    roles: list[UserRole] | None = Field(
        default=None,
        description="Roles to assign (default: configured default roles)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "alice@example.com",
                "username": "alice",
                "password": "P@ssw0rd!",
            }
        }
    )


class LoginRequest(CamelModel):
    """Request schema for login (username or email as identifier)."""

    username_or_email: str = Field(
        ...,
        description="Username, or email address",
        examples=["alice"],
    )
    password: str = Field(..., description="User's password", examples=["P@ssw0rd!"])

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"usernameOrEmail": "alice", "password": "P@ssw0rd!"}
        }
    )


# =============================================================================
# Tokens
# =============================================================================


class RefreshTokenRequest(CamelModel):
    """Request schema for refresh and logout."""

    refresh_token: str = Field(..., description="Refresh token (JWT)")


class TokenResponse(CamelModel):
    """Tokens returned by register, login and refresh.

    Refresh echoes the submitted refresh token (no rotation).
    """

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="Bearer", description="Token type label")


# =============================================================================
# Errors
# =============================================================================


class ErrorResponse(BaseModel):
    """Error body for failed engine operations."""

    status: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="HTTP status title")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")


class ValidationErrorResponse(BaseModel):
    """Error body for request validation failures (400)."""

    status: int = Field(..., description="HTTP status code")
    error: str = Field(default="Validation failed")
    details: list[dict[str, Any]] = Field(..., description="Field-level errors")
