"""Authentication DTOs (Data Transfer Objects).

Result envelopes returned by AuthEngine. Every envelope carries ``success``;
failed envelopes carry an ErrorCode and a message safe to show to clients.

DTOs:
    - AuthenticationResult: register_user / authenticate
    - TokenRefreshResult: refresh_token
    - LogoutResult: logout
    - PasswordChangeResult: change_password
"""

from dataclasses import dataclass
from typing import Self, TypeAlias

from src.core.enums import ErrorCode
from src.domain.entities.user import UserRecord


@dataclass(frozen=True, kw_only=True)
class AuthenticationResult:
    """Outcome of registration or login.

    Attributes:
        success: True when tokens were issued.
        user: Authenticated (or newly registered) user.
        access_token: Signed access token.
        refresh_token: Signed refresh token (indexed in the token store).
        token_type: Token type label (e.g. "Bearer").
        message: Failure message (None on success).
        error_code: Failure classification (None on success).
    """

    success: bool
    user: UserRecord | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    message: str | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def succeeded(
        cls, user: UserRecord, access_token: str, refresh_token: str, token_type: str
    ) -> Self:
        return cls(
            success=True,
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,
            token_type=token_type,
        )

    @classmethod
    def failed(cls, error_code: ErrorCode, message: str) -> Self:
        return cls(success=False, error_code=error_code, message=message)


@dataclass(frozen=True, kw_only=True)
class TokenRefreshResult:
    """Outcome of a token refresh.

    The refresh token is echoed back unchanged (no rotation).
    """

    success: bool
    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    message: str | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def succeeded(cls, access_token: str, refresh_token: str, token_type: str) -> Self:
        return cls(
            success=True,
            access_token=access_token,
            refresh_token=refresh_token,
            token_type=token_type,
        )

    @classmethod
    def failed(cls, error_code: ErrorCode, message: str) -> Self:
        return cls(success=False, error_code=error_code, message=message)


@dataclass(frozen=True, kw_only=True)
class LogoutResult:
    success: bool
    message: str | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def succeeded(cls) -> Self:
        return cls(success=True, message="Logged out")

    @classmethod
    def failed(cls, error_code: ErrorCode, message: str) -> Self:
        return cls(success=False, error_code=error_code, message=message)


@dataclass(frozen=True, kw_only=True)
class PasswordChangeResult:
    success: bool
    message: str | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def succeeded(cls) -> Self:
        return cls(success=True, message="Password changed")

    @classmethod
    def failed(cls, error_code: ErrorCode, message: str) -> Self:
        return cls(success=False, error_code=error_code, message=message)


AuthEnvelope: TypeAlias = (
    AuthenticationResult | TokenRefreshResult | LogoutResult | PasswordChangeResult
)
