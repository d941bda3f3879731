"""Data Transfer Objects (DTOs) for application layer.

DTOs are result envelopes returned by AuthEngine. They transfer data from
the application layer to the presentation layer.

Note:
    DTOs are NOT the same as API schemas (Pydantic models in
    src/schemas/auth_schemas.py).
"""

from src.application.dtos.auth_dtos import (
    AuthEnvelope,
    AuthenticationResult,
    LogoutResult,
    PasswordChangeResult,
    TokenRefreshResult,
)

__all__ = [
    "AuthEnvelope",
    "AuthenticationResult",
    "LogoutResult",
    "PasswordChangeResult",
    "TokenRefreshResult",
]
