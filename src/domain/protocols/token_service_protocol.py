"""Token service protocol for domain layer.

Issues signed access/refresh tokens, validates them and revokes refresh
tokens. Store-backed operations are async and raise TransientStorageError
when the token store fails; pure parsing operations are synchronous and
never raise.

Refresh token lifecycle:
    Issued -> Live -> (Expired | Revoked)
Terminal states are absorbing.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from src.domain.entities.user import UserRecord


class TokenServiceProtocol(Protocol):
    """JWT issue/validate/revoke interface."""

    @property
    def token_type(self) -> str:
        """Token type label returned to clients (default 'Bearer')."""
        ...

    @property
    def access_token_ttl(self) -> int:
        """Access token lifetime in seconds."""
        ...

    def generate_access_token(
        self,
        user: UserRecord,
        *,
        ttl: int | None = None,
        extra_claims: Mapping[str, Any] | None = None,
    ) -> str:
        """Mint an access token (sub, username, roles, iat, exp, typ=access)."""
        ...

    async def generate_refresh_token(
        self, user: UserRecord, *, ttl: int | None = None
    ) -> str:
        """Mint a refresh token and index it under user:<uid>:<token>.

        Raises:
            TransientStorageError: If the index entry cannot be written.
        """
        ...

    def is_token_valid(self, token: str) -> bool:
        """Signature verifies and required claims are present (expiry ignored)."""
        ...

    async def is_token_valid_and_not_expired(self, token: str) -> bool:
        """Valid, not expired and (for refresh tokens) not revoked."""
        ...

    def is_token_signature_valid(self, token: str) -> bool:
        """Signature-only check; expired but well-signed tokens pass."""
        ...

    def extract_user_id(self, token: str) -> UUID | None:
        ...

    def extract_username(self, token: str) -> str | None:
        ...

    def extract_roles(self, token: str) -> frozenset[str] | None:
        ...

    def extract_claim(self, token: str, name: str) -> Any | None:
        ...

    def get_expiration_time(self, token: str) -> datetime | None:
        ...

    def get_issue_time(self, token: str) -> datetime | None:
        ...

    async def refresh_access_token(self, refresh_token: str) -> str | None:
        """Mint a new access token from a live, indexed refresh token.

        Returns:
            New access token, or None if the refresh token is not usable.
        """
        ...

    async def revoke_refresh_token(self, refresh_token: str) -> None:
        """Revoke one refresh token (idempotent, no-op on invalid tokens)."""
        ...

    async def revoke_all_tokens_for_user(self, user_id: UUID) -> None:
        """Revoke every indexed refresh token of a user (idempotent)."""
        ...

    async def is_refresh_token_revoked(self, refresh_token: str) -> bool:
        ...
